"""
Templates and the executor that runs them.
"""

from .executor import TemplateExecutor, merge_outputs, resolve_templates
from .template import Template
from .templates import (
    BaseDataModels,
    ClientTemplate,
    InputModels,
    ModelsBase,
    ResponseDataModels,
    ResponseModels,
    TargetTemplate,
    client_templates,
    model_templates,
)

__all__ = [
    "BaseDataModels",
    "ClientTemplate",
    "InputModels",
    "ModelsBase",
    "ResponseDataModels",
    "ResponseModels",
    "TargetTemplate",
    "Template",
    "TemplateExecutor",
    "client_templates",
    "merge_outputs",
    "model_templates",
    "resolve_templates",
]
