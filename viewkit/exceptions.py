from typing import Optional


class ViewKitError(Exception):
    # base exception for all application-specific errors.
    pass

class ConfigError(ViewKitError):
    # errors related to configuration and function table input.
    pass

class DiscoveryError(ViewKitError):
    # errors enumerating or reading template files.
    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path

class CompileError(ViewKitError):
    # errors decoding or parsing a template file.
    def __init__(self, message: str, template_name: Optional[str] = None, path: Optional[str] = None):
        super().__init__(message)
        self.template_name = template_name
        self.path = path

class TemplateNotFoundError(ViewKitError, LookupError):
    # render asked for a name that is not in the registry.
    def __init__(self, template_name: str):
        super().__init__(f"template '{template_name}' not found")
        self.template_name = template_name

class LayoutNotFoundError(TemplateNotFoundError):
    # render asked for a layout that is not in the registry.
    def __init__(self, template_name: str):
        ViewKitError.__init__(self, f"layout '{template_name}' not found")
        self.template_name = template_name

class RenderError(ViewKitError):
    # a compiled template failed while executing against its data.
    def __init__(self, message: str, template_name: Optional[str] = None):
        super().__init__(message)
        self.template_name = template_name
