from fastapi import APIRouter, Depends, HTTPException, Response, status

from hireprep.core.security import resolve_client_id
from hireprep.schemas.storage import (
    AppendQuestionsRequest,
    LastInput,
    SaveHistoryRequest,
    SaveInputRequest,
    SavedHistory,
    SavedInput,
    UpdateHistoryRequest,
    UpdateInputRequest,
)
from hireprep.storage import KeyValueStore, PrepStore, get_kv_store

router = APIRouter()


def get_prep_store(
    client_id: str = Depends(resolve_client_id),
    backend: KeyValueStore = Depends(get_kv_store),
) -> PrepStore:
    return PrepStore(backend, namespace=client_id)


def _not_found(kind: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{kind} not found")


@router.get("/saved-inputs", response_model=list[SavedInput])
def list_saved_inputs(store: PrepStore = Depends(get_prep_store)):
    return store.saved_inputs.all()


@router.post("/saved-inputs", response_model=SavedInput, status_code=status.HTTP_201_CREATED)
def create_saved_input(payload: SaveInputRequest, store: PrepStore = Depends(get_prep_store)):
    return store.saved_inputs.save(payload.resume, payload.job_description, payload.name)


@router.patch("/saved-inputs/{input_id}", response_model=SavedInput)
def update_saved_input(
    input_id: str,
    payload: UpdateInputRequest,
    store: PrepStore = Depends(get_prep_store),
):
    updated = store.saved_inputs.update(
        input_id,
        name=payload.name,
        resume=payload.resume,
        job_description=payload.job_description,
    )
    if updated is None:
        raise _not_found("Saved input")
    return updated


@router.delete("/saved-inputs/{input_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_saved_input(input_id: str, store: PrepStore = Depends(get_prep_store)):
    if not store.saved_inputs.delete(input_id):
        raise _not_found("Saved input")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/history", response_model=list[SavedHistory])
def list_history(store: PrepStore = Depends(get_prep_store)):
    return store.history.all()


@router.post("/history", response_model=SavedHistory, status_code=status.HTTP_201_CREATED)
def create_history(payload: SaveHistoryRequest, store: PrepStore = Depends(get_prep_store)):
    return store.history.save(payload.resume, payload.job_description, payload.result, payload.name)


@router.delete("/history", status_code=status.HTTP_204_NO_CONTENT)
def clear_history(store: PrepStore = Depends(get_prep_store)):
    store.history.clear()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/history/{history_id}", response_model=SavedHistory)
def get_history(history_id: str, store: PrepStore = Depends(get_prep_store)):
    record = store.history.get(history_id)
    if record is None:
        raise _not_found("History entry")
    return record


@router.patch("/history/{history_id}", response_model=SavedHistory)
def update_history(
    history_id: str,
    payload: UpdateHistoryRequest,
    store: PrepStore = Depends(get_prep_store),
):
    updated = store.history.update(history_id, name=payload.name)
    if updated is None:
        raise _not_found("History entry")
    return updated


@router.post("/history/{history_id}/questions", response_model=SavedHistory)
def append_history_questions(
    history_id: str,
    payload: AppendQuestionsRequest,
    store: PrepStore = Depends(get_prep_store),
):
    updated = store.history.append_questions(history_id, payload.questions)
    if updated is None:
        raise _not_found("History entry")
    return updated


@router.delete("/history/{history_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_history(history_id: str, store: PrepStore = Depends(get_prep_store)):
    if not store.history.delete(history_id):
        raise _not_found("History entry")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/last-input", response_model=LastInput | None)
def get_last_input(store: PrepStore = Depends(get_prep_store)):
    return store.last_input.value


@router.put("/last-input", response_model=LastInput)
def put_last_input(payload: LastInput, store: PrepStore = Depends(get_prep_store)):
    return store.save_last_input(payload.resume, payload.job_description)


@router.delete("/last-input", status_code=status.HTTP_204_NO_CONTENT)
def clear_last_input(store: PrepStore = Depends(get_prep_store)):
    store.last_input.clear()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
