"""Score calculators over file records.

All functions are pure and accept any object exposing the flattened
metric attributes of FileAnalysisRecord.
"""

from typing import Sequence

from devdash.constants import (
    ACCESSIBILITY_NO_IMAGES_ALT_SCORE,
    EMPTY_CONSISTENCY_SCORE,
    MAX_SCORE,
    OVERVIEW_NO_IMAGES_ALT_COVERAGE,
    SEMANTIC_SCORE_MULTIPLIER,
    STRUCTURE_WEIGHTS,
)
from devdash.models import FileAnalysisRecord


def _mean(values) -> float:
    values = list(values)
    return sum(values) / len(values) if values else 0.0


def _percentage(count: int, total: int) -> float:
    return count / total * 100 if total else 0.0


def calculate_structure_score(file: FileAnalysisRecord) -> float:
    """Weighted structure score for one file (0-100)."""
    return float(sum(
        weight
        for attribute, weight in STRUCTURE_WEIGHTS.items()
        if getattr(file, attribute)
    ))


def average_alt_coverage(files: Sequence[FileAnalysisRecord], default: float) -> float:
    """Mean alt coverage over files that contain at least one image.

    Args:
        files: File records
        default: Value returned when no file has images

    Returns:
        Mean coverage percentage, or default
    """
    with_images = [f.alt_tag_coverage for f in files if f.total_images > 0]
    if not with_images:
        return default
    return _mean(with_images)


def average_semantic_ratio(files: Sequence[FileAnalysisRecord]) -> float:
    return _mean(f.semantic_ratio for f in files)


def overview_alt_coverage(files: Sequence[FileAnalysisRecord]) -> float:
    """Alt coverage as reported in overviews and trends (0 when no images)."""
    return average_alt_coverage(files, OVERVIEW_NO_IMAGES_ALT_COVERAGE)


def calculate_accessibility_score(files: Sequence[FileAnalysisRecord]) -> float:
    """Mean of alt coverage, heading correctness and lang/title presence.

    Files without images do not count towards the alt component; when no
    file has images that component is 100. An empty file set scores 0.
    """
    if not files:
        return 0.0

    alt_score = average_alt_coverage(files, ACCESSIBILITY_NO_IMAGES_ALT_SCORE)
    heading_score = _percentage(
        sum(1 for f in files if f.has_proper_heading_hierarchy), len(files)
    )
    structure_score = _mean(
        (50 if f.has_lang_attribute else 0) + (50 if f.has_title else 0)
        for f in files
    )

    return (alt_score + heading_score + structure_score) / 3


def calculate_consistency_score(files: Sequence[FileAnalysisRecord]) -> float:
    """Mean prevalence of doctype, lang, viewport and title across files."""
    if not files:
        return EMPTY_CONSISTENCY_SCORE

    total = len(files)
    doctype = _percentage(sum(1 for f in files if f.has_doctype), total)
    lang = _percentage(sum(1 for f in files if f.has_lang_attribute), total)
    viewport = _percentage(sum(1 for f in files if f.has_meta_viewport), total)
    title = _percentage(sum(1 for f in files if f.has_title), total)

    return (doctype + lang + viewport + title) / 4


def calculate_semantic_score(mean_semantic_ratio: float) -> float:
    return min(mean_semantic_ratio * SEMANTIC_SCORE_MULTIPLIER, MAX_SCORE)


def calculate_overall_quality_score(files: Sequence[FileAnalysisRecord]) -> float:
    """Mean of structure, rescaled semantic and accessibility scores (0-100)."""
    structure_score = _mean(calculate_structure_score(f) for f in files)
    semantic_score = calculate_semantic_score(average_semantic_ratio(files))
    accessibility_score = calculate_accessibility_score(files)

    return (structure_score + semantic_score + accessibility_score) / 3
