"""
Loading people and whole working sets from files.

Staff rosters arrive as CSV with columns:
    id, name, region, max_hours[, hours_allocated, holidays, skills]
where skills is a comma-separated list inside one cell.
"""

import io
import json
import logging
from pathlib import Path
from typing import List, Optional, Sequence, Union

import pandas as pd

from ..errors import ValidationError
from .models import Person, parse_skills
from .store import EntityStore

logger = logging.getLogger(__name__)

REQUIRED_PEOPLE_COLUMNS = ['id', 'name', 'region', 'max_hours']


def people_from_dataframe(df: pd.DataFrame) -> List[Person]:
    """
    Convert a roster DataFrame to Person records.

    Args:
        df: DataFrame with at least the REQUIRED_PEOPLE_COLUMNS

    Returns:
        List of Person objects in row order
    """
    missing_cols = [col for col in REQUIRED_PEOPLE_COLUMNS if col not in df.columns]
    if missing_cols:
        raise ValidationError(f"Missing required columns: {missing_cols}")

    people = []
    for _, row in df.iterrows():
        skills = row.get('skills')
        people.append(Person(
            id=str(row['id']),
            name=str(row['name']).strip(),
            region=str(row['region']).strip(),
            max_hours=float(row['max_hours']),
            hours_allocated=_number(row.get('hours_allocated'), 0.0),
            holidays=int(_number(row.get('holidays'), 0)),
            skills=[] if pd.isna(skills) else parse_skills(str(skills)),
        ))
    return people


def _number(value, default):
    if value is None or pd.isna(value):
        return default
    return float(value)


def read_people_csv(source: Union[str, Path, bytes]) -> List[Person]:
    """Read a roster CSV from a path or raw uploaded bytes."""
    if isinstance(source, bytes):
        df = pd.read_csv(io.StringIO(source.decode('utf-8')), dtype={'id': str})
    else:
        df = pd.read_csv(source, dtype={'id': str})
    people = people_from_dataframe(df)
    logger.info("Read %d people from roster CSV", len(people))
    return people


def load_store(path: Union[str, Path], regions: Optional[Sequence[str]] = None) -> EntityStore:
    """Load a JSON working set (as written by EntityStore.snapshot())."""
    with Path(path).open("r", encoding="utf-8") as fh:
        data = json.load(fh)
    return EntityStore.from_dict(data, regions=regions)


def save_store(store: EntityStore, path: Union[str, Path]) -> None:
    """Write the working set as JSON, orphaned time entries included."""
    with Path(path).open("w", encoding="utf-8") as fh:
        json.dump(store.snapshot(), fh, indent=2)
