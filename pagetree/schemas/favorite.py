from pydantic import BaseModel, Field, field_validator
from typing import List

# Schemas pour les favoris

class FavoriteReorder(BaseModel):
    ordered_ids: List[int] = Field(min_length=1)

    @field_validator("ordered_ids")
    @classmethod
    def no_duplicates(cls, value):
        # un id répété donnerait deux favoris à la même position
        if len(set(value)) != len(value):
            raise ValueError("ordered_ids must not contain duplicates")
        return value
