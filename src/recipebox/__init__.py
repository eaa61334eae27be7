import logging as module_logging

import recipebox.logging as application_logging

application_logging.configure()
logger = module_logging.getLogger(__name__)

__project__ = "recipebox-api"
__version__ = "2026.1.0"

logger.info(f"Recipebox {__version__}")
