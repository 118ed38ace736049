"""
L1 Domain — pure functions, no I/O.
"""

from coreprov.core.services.provision.domain.templates import (  # noqa: F401
    ARCH_PLACEHOLDER,
    VERSION_PLACEHOLDER,
    TemplateExpansionError,
    build_default_templates,
    expand_templates,
    parse_templates,
    render_templates,
    uses_placeholders,
)
