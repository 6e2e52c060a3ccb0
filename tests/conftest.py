"""Shared fixtures: a small record model and repositories on temporary stores."""
from typing import Optional

import pytest
from pydantic import BaseModel, ConfigDict, Field

from recordstore.models.base import RecordModel
from recordstore.repository import Repository


class PersonSchema(BaseModel):
    model_config = ConfigDict(extra="allow")

    Id: int = Field(default=0, ge=0)
    Name: str = Field(..., min_length=1)
    Rank: Optional[str] = None


class PersonModel(RecordModel):
    type_name = "Person"
    schema = PersonSchema
    key = "Name"


class NoteModel(RecordModel):
    """Same fields as PersonModel but no key field."""
    type_name = "Note"
    schema = PersonSchema


@pytest.fixture
def person_model():
    return PersonModel()


@pytest.fixture
def repo(tmp_path, person_model):
    """Empty Person repository backed by a file under tmp_path."""
    return Repository(person_model, data_root=tmp_path)


@pytest.fixture
def note_repo(tmp_path):
    return Repository(NoteModel(), data_root=tmp_path)
