class AppError(Exception):
    """
    Error operacional: se informa al cliente tal cual, con su status HTTP.
    Cualquier otra excepción se trata como error interno.
    """

    is_operational = True

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class TemplateNotFoundError(AppError):
    def __init__(self, template_type: str):
        super().__init__(f"Template type '{template_type}' not found", 500)
        self.template_type = template_type


class TemplateDataError(AppError):
    def __init__(self, message: str):
        super().__init__(message, 400)


class EmailDeliveryError(AppError):
    def __init__(self, message: str = "Failed to send email"):
        super().__init__(message, 500)
