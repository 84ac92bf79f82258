"""
Presentation CRUD operations.

Dependencies: deckrag.boundary.db.models
System role: Presentation persistence operations
"""

from deckrag.boundary.db.CRUD.base_crud import BaseCRUD
from deckrag.boundary.db.models.presentation_model import PresentationModel


class PresentationCRUD(BaseCRUD[PresentationModel]):
    """CRUD operations for PresentationModel."""

    def __init__(self) -> None:
        super().__init__(PresentationModel)


presentation_crud = PresentationCRUD()
