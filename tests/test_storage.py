import sys
import tempfile
import unittest
from datetime import datetime, timedelta, timezone
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from hireprep.schemas.prep import GenerationResult, Question  # noqa: E402
from hireprep.schemas.storage import SavedInput  # noqa: E402
from hireprep.storage import (  # noqa: E402
    InMemoryKeyValueStore,
    PrepStore,
    SavedInputCollection,
    SqliteKeyValueStore,
    generate_id,
)
from hireprep.storage.prep_store import HISTORY_KEY, LAST_INPUT_KEY, SAVED_INPUTS_KEY  # noqa: E402
from tests.fakes import generation_payload, question_payload  # noqa: E402


class FailingWritesStore(InMemoryKeyValueStore):
    def set(self, key: str, value: str) -> None:
        raise OSError("disk full")


class PrepStoreTests(unittest.TestCase):
    def setUp(self):
        self.backend = InMemoryKeyValueStore()
        self.store = PrepStore(self.backend)

    def test_saved_input_round_trip(self):
        before = datetime.now(timezone.utc)
        saved = self.store.saved_inputs.save("resume text", "jd text", "Acme backend")

        self.assertEqual(saved.name, "Acme backend")
        self.assertGreaterEqual(saved.created_at, before - timedelta(seconds=1))

        reloaded = PrepStore(self.backend)
        self.assertEqual(reloaded.saved_inputs.all(), [saved])
        self.assertIn('"jobDescription"', self.backend.get(SAVED_INPUTS_KEY))

    def test_default_names_use_the_creation_date(self):
        saved = self.store.saved_inputs.save("r", "j")
        self.assertTrue(saved.name.startswith("Saved "))
        entry = self.store.history.save("r", "j", GenerationResult.model_validate(generation_payload(12)))
        self.assertTrue(entry.name.startswith("Prep "))

    def test_new_records_are_prepended_with_unique_ids(self):
        first = self.store.saved_inputs.save("r1", "j1", "first")
        second = self.store.saved_inputs.save("r2", "j2", "second")

        self.assertEqual([item.id for item in self.store.saved_inputs.all()], [second.id, first.id])
        self.assertNotEqual(first.id, second.id)

    def test_delete_preserves_order_of_the_rest(self):
        ids = [self.store.saved_inputs.save("r", "j", f"n{i}").id for i in range(3)]
        self.assertTrue(self.store.saved_inputs.delete(ids[1]))
        self.assertFalse(self.store.saved_inputs.delete("missing"))
        self.assertEqual([item.id for item in self.store.saved_inputs.all()], [ids[2], ids[0]])

    def test_update_merges_only_given_fields(self):
        saved = self.store.saved_inputs.save("resume", "jd", "old")
        updated = self.store.saved_inputs.update(saved.id, name="new", resume=None)

        self.assertEqual(updated.name, "new")
        self.assertEqual(updated.resume, "resume")
        self.assertEqual(updated.created_at, saved.created_at)
        self.assertIsNone(self.store.saved_inputs.update("missing", name="x"))

    def test_append_questions_extends_history_result(self):
        entry = self.store.history.save("r", "j", GenerationResult.model_validate(generation_payload(12)))
        extra = [Question.model_validate(question_payload("Extra question?"))]

        updated = self.store.history.append_questions(entry.id, extra)

        self.assertEqual(len(updated.result.questions), 13)
        self.assertEqual(updated.result.questions[-1].question, "Extra question?")
        self.assertEqual(updated.result.prep_plan, entry.result.prep_plan)
        self.assertEqual(len(PrepStore(self.backend).history.get(entry.id).result.questions), 13)
        self.assertIsNone(self.store.history.append_questions("missing", extra))

    def test_clear_history(self):
        self.store.history.save("r", "j", GenerationResult.model_validate(generation_payload(12)))
        self.store.history.clear()
        self.assertEqual(self.store.history.all(), [])
        self.assertIsNone(self.backend.get(HISTORY_KEY))

    def test_last_input_is_overwritten(self):
        self.assertIsNone(self.store.last_input.value)
        self.store.save_last_input("r1", "j1")
        self.store.save_last_input("r2", "j2")

        value = PrepStore(self.backend).last_input.value
        self.assertEqual((value.resume, value.job_description), ("r2", "j2"))

        self.store.last_input.clear()
        self.assertIsNone(PrepStore(self.backend).last_input.value)

    def test_corrupted_json_loads_as_empty(self):
        self.backend.set(SAVED_INPUTS_KEY, "{not json")
        with self.assertLogs("hireprep.storage.collections", level="ERROR") as logs:
            store = PrepStore(self.backend)
        self.assertEqual(store.saved_inputs.all(), [])
        self.assertIn("Failed to parse hireprep_saved_inputs", logs.output[0])

    def test_corrupted_last_input_loads_as_none(self):
        self.backend.set(LAST_INPUT_KEY, '{"resume": ')
        with self.assertLogs("hireprep.storage.collections", level="ERROR") as logs:
            store = PrepStore(self.backend)
        self.assertIsNone(store.last_input.value)
        self.assertIn("Failed to parse hireprep_last_input", logs.output[0])

        store.save_last_input("r", "j")
        self.assertEqual(PrepStore(self.backend).last_input.value.resume, "r")

    def test_wrong_shape_loads_as_empty(self):
        self.backend.set(HISTORY_KEY, '[{"id": 1, "name": null}]')
        with self.assertLogs("hireprep.storage.collections", level="ERROR"):
            store = PrepStore(self.backend)
        self.assertEqual(store.history.all(), [])

    def test_failed_write_leaves_memory_unchanged(self):
        backend = FailingWritesStore()
        collection = SavedInputCollection(backend, SAVED_INPUTS_KEY, SavedInput)
        with self.assertRaises(OSError):
            collection.save("r", "j")
        self.assertEqual(collection.all(), [])

    def test_namespaces_are_isolated(self):
        self.store.saved_inputs.save("r", "j", "default client")
        other = PrepStore(self.backend, namespace="client-b")
        other.saved_inputs.save("r", "j", "client b")

        self.assertEqual([i.name for i in PrepStore(self.backend).saved_inputs.all()], ["default client"])
        self.assertEqual([i.name for i in other.saved_inputs.all()], ["client b"])
        self.assertIsNotNone(self.backend.get("client-b:" + SAVED_INPUTS_KEY))


class GenerateIdTests(unittest.TestCase):
    def test_format(self):
        value = generate_id()
        millis, suffix = value.split("-")
        self.assertTrue(millis.isdigit())
        self.assertEqual(len(suffix), 9)
        self.assertRegex(suffix, r"^[0-9a-z]{9}$")

    def test_ids_are_unique(self):
        self.assertEqual(len({generate_id() for _ in range(500)}), 500)


class SqliteKeyValueStoreTests(unittest.TestCase):
    def test_values_survive_reopen(self):
        with tempfile.TemporaryDirectory() as tmp_dir:
            db_path = str(Path(tmp_dir) / "nested" / "store.db")
            backend = SqliteKeyValueStore(db_path)
            backend.warmup()
            saved = PrepStore(backend).saved_inputs.save("resume", "jd", "persisted")
            backend.set("other", "first")
            backend.set("other", "second")
            backend.close()

            reopened = SqliteKeyValueStore(db_path)
            try:
                self.assertEqual(PrepStore(reopened).saved_inputs.all(), [saved])
                self.assertEqual(reopened.get("other"), "second")
                reopened.remove("other")
                self.assertIsNone(reopened.get("other"))
            finally:
                reopened.close()


if __name__ == "__main__":
    unittest.main()
