class JobStatusError(Exception):
    """Base class for client-correctable job errors."""

    status_code = 400

    def __init__(self, message: str, job_id: str | None = None):
        super().__init__(message)
        self.message = message
        self.job_id = job_id


class JobNotFound(JobStatusError):
    status_code = 404

    def __init__(self, job_id: str):
        super().__init__(f"Job not found: {job_id}", job_id=job_id)


class InvalidRequest(JobStatusError):
    status_code = 400


class JobAlreadyExists(JobStatusError):
    status_code = 409

    def __init__(self, job_id: str):
        super().__init__(f"Job already exists: {job_id}", job_id=job_id)


class RegistryFull(JobStatusError):
    status_code = 503

    def __init__(self, limit: int):
        super().__init__(f"Job registry is full ({limit} jobs)")
        self.limit = limit
