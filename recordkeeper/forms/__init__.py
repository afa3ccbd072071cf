"""Form workflow package."""

from recordkeeper.forms.controller import Confirm, FormController

__all__ = ["Confirm", "FormController"]
