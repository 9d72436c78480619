# ~/repositories/cx-pageobject/src/cx_pageobject/_bootstrap.py


def bootstrap_models():
    """
    Resolves the forward references of the recursive definition models.

    SectionDefinition refers to itself and PageDefinition refers to it, so
    both are rebuilt once the module is fully imported. Called from the
    package `__init__` and from the test suite's session fixture.
    """
    from .engine.definitions import (
        ElementDefinition,
        PageDefinition,
        SectionDefinition,
    )

    types_namespace = {
        "ElementDefinition": ElementDefinition,
        "SectionDefinition": SectionDefinition,
    }
    SectionDefinition.model_rebuild(_types_namespace=types_namespace)
    PageDefinition.model_rebuild(_types_namespace=types_namespace)
