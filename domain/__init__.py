"""Describes the recipe generator domain. Centres around the `RecipeController`.

Why is this hard?

- It mostly isn't. Generation is handed to a large language model behind an api
  and history is a list per user in a database.
- What matters is ordering: recipe, then tips, then saving, one call at a time.
- Only the recipe call may fail loudly. Everything after it is best-effort so a
  recipe, once generated, is never hidden from the user.

Both services are faked in the tests.
"""
