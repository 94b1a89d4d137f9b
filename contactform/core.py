"""
# Contact-Form: core.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Core rendering logic.

A form template is rendered as follows:
1. Form-tags are protected with placeholders (block or inline, per their tag types).
2. The template is formatted with automatic paragraphs.
3. The placeholders are restored.
4. Form-tags are replaced with the markup from their renderers.
"""

from contactform.formatter import autop
from contactform.placeholders import PlaceholderMaster
from contactform.registry import TagTypeRegistry
from contactform.scanner import FormTagScanner
from contactform.tagtypes import register_standard_tag_types


def create_default_registry() -> TagTypeRegistry:
    """
    Create a registry with the standard tag types registered.
    """
    registry = TagTypeRegistry()
    register_standard_tag_types(registry)

    return registry


def form_to_html(form: str, scanner: FormTagScanner, auto_p: bool = True) -> str:
    """
    Render a form template to HTML.
    """
    if auto_p:
        placeholder_master = PlaceholderMaster()
        form = scanner.replace_with_placeholders(form, placeholder_master)
        form = autop(form)
        placeholder_master.warn_unrestored(form)
        form = placeholder_master.unprotect(form)

    return scanner.replace_all(form)
