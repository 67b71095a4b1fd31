# -*- coding: utf-8 -*-
"""
Family Registry Controllers
===========================
Controller layer between a UI and the services.

Controllers provide:
- Standardized error handling via OperationResult
- Qt signals for UI updates

Usage:
    from controllers import DataEntryController

    controller = DataEntryController(context)
    result = controller.save_family(form)
    if result.success:
        print(result.message)
    else:
        print(f"Error: {result.message}")
"""

from controllers.base_controller import (
    BaseController,
    OperationResult,
)

from controllers.data_entry_controller import DataEntryController
from controllers.import_controller import ImportController

__all__ = [
    "BaseController",
    "OperationResult",
    "DataEntryController",
    "ImportController",
]
