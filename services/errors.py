"""
Report generation errors for the School Marksheet System
Each error carries a machine-readable kind and the HTTP status it maps to
"""


class ReportError(Exception):
    """Base class for failures surfaced by the report pipeline"""

    kind = 'report_error'
    status_code = 500

    def __init__(self, message):
        super().__init__(message)
        self.message = message

    def to_dict(self):
        return {'success': False, 'error': self.kind, 'message': self.message}


class NotFoundError(ReportError):
    """Requested student or class does not exist"""

    kind = 'not_found'
    status_code = 404


class EmptyInputError(ReportError):
    """Class-wide report requested for a class with no students"""

    kind = 'empty_input'
    status_code = 404


class RenderFailure(ReportError):
    """The document engine failed to produce a PDF"""

    kind = 'render_failure'
    status_code = 500
