"""
Application configuration
"""
from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Application settings"""
    
    # API Configuration
    API_V1_PREFIX: str = "/api/v1"
    DEBUG: bool = False
    
    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]
    
    # Job Tracking
    DEPLOY_TIMEOUT_SECONDS: int = 600  # 10 minutes without progress
    SWEEP_INTERVAL_SECONDS: float = 5.0
    JOB_RETENTION_SECONDS: int = 3600  # 1 hour after the last update
    CLIENT_POLL_INTERVAL_SECONDS: int = 3
    
    # Provisioning backend
    PROVISIONER_URL: str = ""  # empty disables dispatch
    PROVISIONER_API_KEY: str = ""
    PROVISIONER_TIMEOUT_SECONDS: float = 30.0
    CALLBACK_API_KEY: str = ""  # empty accepts unauthenticated callbacks
    
    # Links handed to the wizard, served by the provisioning side
    LOGS_URL_TEMPLATE: str = "/servers/{server_id}/logs"
    COMMAND_URL_TEMPLATE: str = "/servers/{server_id}/command"
    
    def progress_url(self, job_id: str) -> str:
        """Relative URL the wizard polls for a job"""
        return f"{self.API_V1_PREFIX}/progress/{job_id}"
    
    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
