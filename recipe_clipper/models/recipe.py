"""Recipe Pydantic models."""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

DEFAULT_COMPONENT_NAME = "Instructions"


class RecipeComponent(BaseModel):
    """Named sub-part of a recipe (e.g. 'Crust', 'Filling')."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(DEFAULT_COMPONENT_NAME, description="Component name (e.g. 'Crust')")
    steps: List[str] = Field(default_factory=list, description="Ordered cooking steps")
    ingredients: Optional[List[str]] = Field(
        None, description="Ingredients used only by this component"
    )


class Recipe(BaseModel):
    """Canonical recipe returned by the scrape endpoint."""

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "title": "Apple Pie",
                "description": "A classic double-crust pie.",
                "image": "https://example.com/pie.jpg",
                "ingredients": [],
                "components": [
                    {
                        "name": "Crust",
                        "ingredients": ["2 1/2 cups flour", "1 cup cold butter"],
                        "steps": ["Cut the butter into the flour.", "Chill for 1 hour."],
                    },
                    {
                        "name": "Filling",
                        "ingredients": ["6 apples", "3/4 cup sugar"],
                        "steps": ["Slice the apples.", "Toss with sugar."],
                    },
                ],
                "url": "https://example.com/apple-pie",
            }
        },
    )

    title: str = Field(..., min_length=1, description="Recipe title")
    description: Optional[str] = Field(None, description="Short recipe description")
    image: Optional[str] = Field(None, description="Main recipe image URL")
    ingredients: List[str] = Field(
        default_factory=list, description="Top-level ingredient list (raw text)"
    )
    components: List[RecipeComponent] = Field(
        default_factory=list, description="Recipe components with their steps"
    )
    url: str = Field(..., description="Source URL the recipe was scraped from")


class ScrapeRequest(BaseModel):
    """Request body for ``POST /api/scrape``."""

    url: Optional[str] = None


class ErrorResponse(BaseModel):
    """Error body returned by the API."""

    statusMessage: str
    error: str
    request_id: Optional[str] = None
