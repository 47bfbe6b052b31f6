from .edit_form import FormField, OrderingEditForm

__all__ = ["FormField", "OrderingEditForm"]
