class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(self, message: str, status_code: int = 500, details: dict = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

class ValidationError(AppError):
    """Raised when a request field is missing or malformed."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=422, details=details)

class SchedulerError(AppError):
    """Raised when the scheduler encounters a logical error or invalid state."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=400, details=details)

class NoTeacherAvailableError(SchedulerError):
    """Raised when no active teacher can take a course."""
    def __init__(self, course_name: str):
        super().__init__(f"No teacher available for {course_name}", details={"course": course_name})

class ResourceNotFoundError(AppError):
    """Raised when a requested resource is not found."""
    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(f"{resource_type} with id {resource_id} not found", status_code=404)

class ScheduleConflictError(AppError):
    """Raised when a session would overlap an existing one."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=409, details=details)

class DuplicateAssignmentError(AppError):
    """Raised when a block already has an assignment for the course."""
    def __init__(self, block_id: str, course_id: str):
        super().__init__(
            "Course is already assigned in this block",
            status_code=409,
            details={"blockId": block_id, "courseId": course_id},
        )

class RepositoryError(AppError):
    """Raised when the persistence layer fails."""
    def __init__(self, message: str):
        super().__init__(message, status_code=503)

class ConfigurationError(AppError):
    """Raised when system configuration is invalid."""
    def __init__(self, message: str):
        super().__init__(message, status_code=500)
