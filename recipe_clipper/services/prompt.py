"""Prompt generation for recipe extraction."""

from typing import Optional

RECIPE_JSON_SHAPE = """{
  "title": "string",
  "description": "string (optional)",
  "image": "string URL (optional)",
  "ingredients": ["string"],
  "components": [
    {
      "name": "string",
      "ingredients": ["string"],
      "steps": ["string"]
    }
  ]
}"""


def build_extraction_prompt(page_text: str, url: str, image_hint: Optional[str] = None) -> str:
    """Build the prompt asking Gemini to turn page text into recipe JSON."""
    image_line = f"Page preview image: {image_hint}\n" if image_hint else ""

    return f"""Extract the recipe from the web page text below. Respond with ONLY a JSON object, no Markdown, no text before or after it.

Source URL: {url}
{image_line}
JSON shape:
{RECIPE_JSON_SHAPE}

Rules:
1. **title** is required. Use the recipe name, not the site name.
2. **components**: a recipe made of parts (e.g. "Crust", "Filling", "Sauce") gets one component per part, in page order.
   - A recipe with a single list of steps gets one component named "Instructions".
   - Each step is one string without numbering or bullets. Extract ALL steps.
3. **ingredients**:
   - When ingredients are grouped per part, put them in that component's "ingredients" and leave the top-level list empty.
   - Otherwise put every ingredient in the top-level "ingredients" list and omit "ingredients" on components.
   - Keep each ingredient line as written (quantity, unit and name together).
4. **description**: one or two sentences from the page, if there is one. **image**: the main recipe image URL, if known.
5. EXCLUDE FAQs, tips, reader comments, nutrition facts, ads, and related-recipe links.
6. Do not translate, do not invent ingredients or steps that are not on the page.

PAGE TEXT:
{page_text}
"""
