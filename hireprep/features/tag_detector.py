"""Keyword/regex heuristics behind the "AI Detected" badge on the inputs.

Presentation only: nothing here feeds the generation request. Scores are
ad-hoc weights, and ``confidence`` is a display number in [50, 95], not a
probability.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Iterable, Sequence

from pydantic import Field

from hireprep.core.detection_config import get_detection_value
from hireprep.schemas.prep import CamelModel


@dataclass(frozen=True)
class TechPattern:
    pattern: re.Pattern[str]
    skill: str
    weight: float


@dataclass(frozen=True)
class PatternGroup:
    label: str
    patterns: tuple[re.Pattern[str], ...]


def _tech(regex: str, skill: str, weight: float = 1.0) -> TechPattern:
    return TechPattern(re.compile(regex, re.IGNORECASE), skill, weight)


def _group(label: str, *regexes: str) -> PatternGroup:
    return PatternGroup(label, tuple(re.compile(r, re.IGNORECASE) for r in regexes))


_RESUME_TECH: tuple[TechPattern, ...] = (
    _tech(r"\b(react|react\.js|reactjs)\b", "React"),
    _tech(r"\b(node|node\.js|nodejs)\b", "Node.js"),
    _tech(r"\b(python)\b", "Python"),
    _tech(r"\b(java)\b(?!script)", "Java"),
    _tech(r"\b(javascript)\b", "JavaScript"),
    _tech(r"\b(typescript)\b", "TypeScript"),
    _tech(r"\b(aws|amazon web services)\b", "AWS"),
    _tech(r"\b(docker)\b", "Docker"),
    _tech(r"\b(kubernetes|k8s)\b", "Kubernetes", 1.2),
    _tech(r"\b(sql|mysql|postgresql|postgres)\b", "SQL", 0.8),
    _tech(r"\b(mongodb|mongo)\b", "MongoDB"),
    _tech(r"\b(golang)\b", "Go", 1.2),
    _tech(r"\b(rust)\b", "Rust", 1.2),
    _tech(r"(?<![\w+])(c\+\+|cpp)(?![\w+])", "C++"),
    _tech(r"\b(machine learning|deep learning)\b", "ML", 1.5),
    _tech(r"\b(tensorflow|pytorch|keras)\b", "ML", 1.3),
    _tech(r"\b(spring boot|spring framework)\b", "Spring", 1.2),
    _tech(r"\b(angular)\b", "Angular"),
    _tech(r"\b(vue|vue\.js|vuejs)\b", "Vue.js"),
    _tech(r"\b(next\.js|nextjs)\b", "Next.js", 1.1),
    _tech(r"\b(graphql)\b", "GraphQL", 1.1),
    _tech(r"\b(redis)\b", "Redis", 0.9),
    _tech(r"\b(kafka)\b", "Kafka", 1.2),
    _tech(r"\b(elasticsearch)\b", "Elasticsearch", 1.1),
)

_JD_TECH: tuple[TechPattern, ...] = (
    _tech(r"\b(react|react\.js|reactjs)\b", "React"),
    _tech(r"\b(node|node\.js|nodejs)\b", "Node.js"),
    _tech(r"\b(python)\b", "Python"),
    _tech(r"\bjava\b(?!\s*script)", "Java"),
    _tech(r"\b(javascript)\b", "JavaScript"),
    _tech(r"\b(typescript)\b", "TypeScript"),
    _tech(r"\b(aws|amazon web services)\b", "AWS"),
    _tech(r"\b(docker)\b", "Docker"),
    _tech(r"\b(kubernetes|k8s)\b", "Kubernetes", 1.2),
    _tech(r"\b(sql|mysql|postgresql|postgres)\b", "SQL", 0.8),
    _tech(r"\b(mongodb|mongo)\b", "MongoDB"),
    _tech(r"\b(golang)\b", "Go", 1.2),
    _tech(r"\b(rust)\b", "Rust", 1.2),
    _tech(r"\b(graphql)\b", "GraphQL", 1.1),
    _tech(r"\b(redis)\b", "Redis", 0.9),
    _tech(r"\b(spring boot|spring framework|spring)\b", "Spring", 1.2),
    _tech(r"\b(angular)\b", "Angular"),
    _tech(r"\b(vue|vue\.js|vuejs)\b", "Vue.js"),
    _tech(r"\b(next\.js|nextjs)\b", "Next.js", 1.1),
    _tech(r"\b(kafka)\b", "Kafka", 1.2),
    _tech(r"\b(elasticsearch)\b", "Elasticsearch", 1.1),
    _tech(r"\b(terraform)\b", "Terraform", 1.1),
    _tech(r"\b(jenkins|ci/cd)\b", "CI/CD", 0.9),
    _tech(r"\b(machine learning|deep learning|ml)\b", "ML", 1.3),
    _tech(r"\b(tensorflow|pytorch|keras)\b", "ML", 1.3),
)

_RESUME_ROLES: tuple[PatternGroup, ...] = (
    _group("Software Engineer", r"software engineer", r"software developer", r"swe\b"),
    _group("Frontend Engineer", r"frontend engineer", r"front.?end developer", r"ui engineer", r"react developer"),
    _group("Backend Engineer", r"backend engineer", r"back.?end developer", r"server.?side", r"api developer"),
    _group("Full Stack Engineer", r"full.?stack engineer", r"full.?stack developer"),
    _group("Data/ML Engineer", r"data scientist", r"ml engineer", r"machine learning engineer", r"ai engineer"),
    _group(
        "DevOps Engineer",
        r"devops engineer",
        r"sre\b",
        r"site reliability",
        r"platform engineer",
        r"infrastructure",
    ),
    _group("Product Manager", r"product manager", r"product owner", r"\bpm\b"),
    _group("UX Designer", r"ux designer", r"ui designer", r"product designer", r"user experience"),
    _group("Mobile Engineer", r"mobile engineer", r"ios developer", r"android developer", r"mobile developer"),
    _group("Data Engineer", r"data engineer", r"etl developer", r"data architect"),
    _group("Security Engineer", r"security engineer", r"cybersecurity", r"infosec"),
    _group("QA Engineer", r"qa engineer", r"test engineer", r"sdet", r"quality assurance"),
)

_JD_ROLES: tuple[PatternGroup, ...] = (
    _group(
        "Frontend Engineer",
        r"frontend engineer",
        r"front.?end developer",
        r"ui engineer",
        r"react engineer",
        r"frontend developer",
    ),
    _group(
        "Backend Engineer",
        r"backend engineer",
        r"back.?end developer",
        r"server.?side engineer",
        r"api engineer",
        r"backend developer",
    ),
    _group("Full Stack Engineer", r"full.?stack engineer", r"full.?stack developer", r"full stack"),
    _group(
        "Data/ML Engineer",
        r"data scientist",
        r"ml engineer",
        r"machine learning engineer",
        r"ai engineer",
        r"applied scientist",
    ),
    _group(
        "DevOps/SRE",
        r"devops engineer",
        r"\bsre\b",
        r"site reliability engineer",
        r"platform engineer",
        r"infrastructure engineer",
        r"cloud engineer",
    ),
    _group("Product Manager", r"product manager", r"product owner", r"technical pm"),
    _group(
        "Mobile Engineer",
        r"mobile engineer",
        r"ios engineer",
        r"android engineer",
        r"mobile developer",
        r"react native",
        r"flutter developer",
    ),
    _group("Data Engineer", r"data engineer", r"etl developer", r"data architect", r"analytics engineer"),
    _group(
        "Security Engineer",
        r"security engineer",
        r"cybersecurity",
        r"application security",
        r"security analyst",
    ),
    _group(
        "QA Engineer",
        r"qa engineer",
        r"test engineer",
        r"sdet",
        r"quality assurance",
        r"automation engineer",
    ),
    _group("Software Engineer", r"software engineer", r"software developer", r"sde\b", r"engineer", r"developer"),
)

_LEVELS: tuple[PatternGroup, ...] = (
    _group(
        "Senior",
        r"senior\s+(?:software\s+)?engineer",
        r"sr\.\s+engineer",
        r"\bsenior\b",
        r"\blead\b",
        r"principal",
        r"staff engineer",
        r"\biii\b",
        r"level\s*[3-5]",
    ),
    _group(
        "Junior",
        r"junior\s+(?:software\s+)?engineer",
        r"jr\.\s+engineer",
        r"\bjunior\b",
        r"entry.?level",
        r"new grad",
        r"graduate",
        r"\bintern\b",
        r"\bi\b(?=\s+engineer|\s+developer)",
    ),
    _group(
        "Leadership",
        r"engineering manager",
        r"tech lead",
        r"director",
        r"head of",
        r"vp of engineering",
        r"chief",
    ),
)

DEFAULT_LEVEL = "Mid-Level"

# Character class is case-insensitive too, so the continuation stops at any letter.
_RESUME_SECTION_RE = re.compile(r"skills?[:\s]*([^\n]+(?:\n(?![A-Z])[^\n]+)*)", re.IGNORECASE)
_JD_SECTION_RE = re.compile(
    r"(?:required|requirements|must have|qualifications)[:\s]*([\s\S]*?)"
    r"(?=(?:preferred|nice to have|bonus|responsibilities|about|$))",
    re.IGNORECASE,
)
_YEARS_RE = re.compile(r"(\d+)\+?\s*(?:years?|yrs?)\s*(?:of\s+)?(?:experience|exp)", re.IGNORECASE)

_FRONTEND = {"React", "Vue.js", "Angular", "Next.js", "CSS"}
_RESUME_BACKEND = {"Java", "Spring", "Node.js", "Go", "Python", "SQL", "MongoDB"}
_RESUME_ML = {"ML", "Python", "TensorFlow", "PyTorch"}
_RESUME_DEVOPS = {"Docker", "Kubernetes", "AWS", "Terraform"}
_JD_BACKEND = {"Java", "Spring", "Node.js", "Go", "Python", "SQL", "MongoDB", "Redis", "Kafka"}
_JD_ML = {"ML", "Python"}
_JD_DEVOPS = {"Docker", "Kubernetes", "AWS", "Terraform", "CI/CD"}


class ResumeDetection(CamelModel):
    role: str
    level: str = DEFAULT_LEVEL
    skills: list[str] = Field(default_factory=list)
    confidence: int = Field(ge=50, le=95)


class JobDetection(CamelModel):
    role: str
    level: str = DEFAULT_LEVEL
    tech_stack: list[str] = Field(default_factory=list)
    confidence: int = Field(ge=50, le=95)


def _count(pattern: re.Pattern[str], text: str) -> int:
    return sum(1 for _ in pattern.finditer(text))


def score_technologies(
    text: str,
    patterns: Sequence[TechPattern],
    section: str | None,
) -> dict[str, float]:
    cap = float(get_detection_value("keyword_score_cap", 5))
    bonus = float(get_detection_value("section_bonus", 2))
    scores: dict[str, float] = {}
    for tech in patterns:
        count = _count(tech.pattern, text)
        if count:
            scores[tech.skill] = scores.get(tech.skill, 0.0) + min(count * tech.weight, cap)
    if section:
        for tech in patterns:
            if tech.pattern.search(section):
                scores[tech.skill] = scores.get(tech.skill, 0.0) + bonus
    return scores


def top_technologies(scores: dict[str, float], limit: int) -> list[str]:
    ranked = sorted(scores.items(), key=lambda item: item[1], reverse=True)
    return [skill for skill, _ in ranked[:limit]]


def score_groups(text: str, groups: Iterable[PatternGroup]) -> dict[str, int]:
    scores: dict[str, int] = {}
    for group in groups:
        total = sum(_count(pattern, text) for pattern in group.patterns)
        if total > 0:
            scores[group.label] = total
    return scores


def _best(scores: dict[str, int | float], default: str) -> tuple[str, float]:
    label, best = default, 0
    for candidate, score in scores.items():
        if score > best:
            label, best = candidate, score
    return label, best


def _infer_resume_role(skills: list[str]) -> dict[str, int]:
    frontend = sum(1 for s in skills if s in _FRONTEND)
    backend = sum(1 for s in skills if s in _RESUME_BACKEND)
    ml = sum(1 for s in skills if s in _RESUME_ML)
    devops = sum(1 for s in skills if s in _RESUME_DEVOPS)
    if ml >= 2:
        return {"Data/ML Engineer": ml}
    if devops >= 2:
        return {"DevOps Engineer": devops}
    if frontend >= 2 and backend >= 2:
        return {"Full Stack Engineer": frontend + backend}
    if frontend > backend:
        return {"Frontend Engineer": frontend}
    if backend > 0:
        return {"Backend Engineer": backend}
    return {"Software Engineer": 1}


def _infer_job_role(stack: list[str], scores: dict[str, int]) -> dict[str, int]:
    frontend = sum(1 for s in stack if s in _FRONTEND)
    backend = sum(1 for s in stack if s in _JD_BACKEND)
    ml = sum(1 for s in stack if s in _JD_ML)
    devops = sum(1 for s in stack if s in _JD_DEVOPS)
    inferred = dict(scores)
    if ml >= 2:
        inferred["Data/ML Engineer"] = inferred.get("Data/ML Engineer", 0) + ml * 2
    elif devops >= 3:
        inferred["DevOps/SRE"] = inferred.get("DevOps/SRE", 0) + devops * 2
    elif frontend >= 2 and backend < 2:
        inferred["Frontend Engineer"] = inferred.get("Frontend Engineer", 0) + frontend * 2
    elif backend >= 3 and frontend < 2:
        inferred["Backend Engineer"] = inferred.get("Backend Engineer", 0) + backend * 2
    elif frontend >= 2 and backend >= 2:
        inferred["Full Stack Engineer"] = inferred.get("Full Stack Engineer", 0) + frontend + backend
    return inferred


def detect_level(text: str) -> tuple[str, int]:
    """Return (level label, strongest level keyword count)."""
    level, strength = _best(score_groups(text, _LEVELS), DEFAULT_LEVEL)
    if strength == 0:
        years_match = _YEARS_RE.search(text)
        if years_match:
            years = int(years_match.group(1))
            if years >= 7:
                level = "Senior"
            elif years >= 3:
                level = "Mid-Level"
            else:
                level = "Junior"
    return level, int(strength)


def _bucket(value: float, buckets: Any, *, strict: bool = False) -> int:
    for threshold, points in buckets or []:
        if (value > threshold) if strict else (value >= threshold):
            return int(points)
    return 0


def compute_confidence(
    kind: str,
    *,
    role_strength: float,
    technology_count: int,
    level_strength: int,
    text_length: int,
) -> int:
    rules = get_detection_value(f"{kind}.confidence", {}) or {}
    confidence = int(get_detection_value("confidence.base", 50))
    confidence += _bucket(role_strength, rules.get("role"))
    confidence += _bucket(technology_count, rules.get("technologies"))
    confidence += _bucket(level_strength, rules.get("level"))
    confidence += _bucket(text_length, rules.get("length"), strict=True)
    return min(confidence, int(get_detection_value("confidence.max", 95)))


def _long_enough(text: str | None) -> bool:
    return bool(text) and len(text) >= int(get_detection_value("min_text_length", 100))


def detect_resume_profile(text: str) -> ResumeDetection | None:
    if not _long_enough(text):
        return None

    section_match = _RESUME_SECTION_RE.search(text)
    section = section_match.group(1).lower() if section_match else None
    scores = score_technologies(text, _RESUME_TECH, section)
    skills = top_technologies(scores, int(get_detection_value("resume.top_n", 6)))

    role_scores = score_groups(text, _RESUME_ROLES)
    if not role_scores and skills:
        role_scores = _infer_resume_role(skills)
    role, role_strength = _best(role_scores, str(get_detection_value("resume.default_role", "Tech Professional")))

    if not skills and role_strength <= 0:
        return None

    level, level_strength = detect_level(text)
    confidence = compute_confidence(
        "resume",
        role_strength=role_strength,
        technology_count=len(skills),
        level_strength=level_strength,
        text_length=len(text),
    )
    return ResumeDetection(role=role, level=level, skills=skills, confidence=confidence)


def detect_job_profile(text: str) -> JobDetection | None:
    if not _long_enough(text):
        return None

    section_match = _JD_SECTION_RE.search(text)
    section = section_match.group(1) if section_match else None
    scores = score_technologies(text, _JD_TECH, section)
    stack = top_technologies(scores, int(get_detection_value("job_description.top_n", 8)))

    role_scores = score_groups(text, _JD_ROLES)
    if not role_scores or (len(role_scores) == 1 and "Software Engineer" in role_scores):
        role_scores = _infer_job_role(stack, role_scores)
    role, role_strength = _best(
        role_scores, str(get_detection_value("job_description.default_role", "Software Engineer"))
    )

    if not stack and role_strength <= 0:
        return None

    level, level_strength = detect_level(text)
    confidence = compute_confidence(
        "job_description",
        role_strength=role_strength,
        technology_count=len(stack),
        level_strength=level_strength,
        text_length=len(text),
    )
    return JobDetection(role=role, level=level, tech_stack=stack, confidence=confidence)
