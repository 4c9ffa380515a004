# recipebook/services/recipe_resolver.py
from .recipe_store import LocalRecipeStore


class RecipeResolver:
    """
    Dispatch a RecipeRef to the catalog or the local store.

    `ref.source` is the only branch point; the returned summary/detail always
    carries the same source flag as the ref it was resolved from.
    """

    def __init__(self, catalog, store=LocalRecipeStore):
        self.catalog = catalog
        self.store = store

    def resolve(self, ref):
        if ref.is_external:
            return self.catalog.lookup(ref.recipe_id)
        return self.store.get(ref.recipe_id)

    def preview(self, ref):
        if ref.is_external:
            return self.catalog.lookup(ref.recipe_id).summary()
        return self.store.preview(ref.recipe_id)

    def exists(self, ref):
        if ref.is_external:
            return self.catalog.exists(ref.recipe_id)
        return self.store.exists(ref.recipe_id)
