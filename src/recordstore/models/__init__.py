"""
Record models - Validation and field contracts per record type

MODELS maps the lower-cased plural resource name to the
model instance serving it.
"""

from typing import Dict

from recordstore.models.base import RecordModel
from recordstore.models.bookmark import BookmarkModel
from recordstore.models.contact import ContactModel

MODELS: Dict[str, RecordModel] = {
    model.resource_name.lower(): model for model in (ContactModel(), BookmarkModel())
}

__all__ = ["RecordModel", "ContactModel", "BookmarkModel", "MODELS"]
