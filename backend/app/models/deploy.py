"""
Deploy request/response models
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class LoadingScreen(BaseModel):
    """Loading screen shown to players while the server boots"""
    model_config = ConfigDict(frozen=True)

    enabled: bool = True
    type: str = "percentage"
    percentage: int = Field(10, ge=0, le=100)


class DeployRequest(BaseModel):
    """
    Deploy request sent by the wizard.

    Only edition and version are required; everything else falls back to
    the wizard defaults in with_defaults(). Frozen so the copy stored on
    a Job cannot be edited behind the registry's back.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    edition: Optional[str] = Field(None, description="Server distribution, e.g. vanilla or paper")
    version: Optional[str] = Field(None, description="Game version, e.g. 1.20.4")
    motd: Optional[str] = None
    ram: int = Field(2, ge=1, le=64, description="RAM in GB")
    server_name: Optional[str] = Field(None, alias="serverName")
    gamemode: str = "survival"
    difficulty: str = "normal"
    max_players: int = Field(20, ge=1, le=1000, alias="maxPlayers")
    online_mode: bool = Field(False, alias="onlineMode")
    loading_screen: LoadingScreen = Field(default_factory=LoadingScreen, alias="loadingScreen")

    def with_defaults(self) -> "DeployRequest":
        """
        Fill the generated server name and MOTD.
        Expects edition and version to be present.
        """
        edition = self.edition.strip()
        version = self.version.strip()
        server_name = self.server_name.strip() if self.server_name else ""
        if not server_name:
            server_name = f"{edition}-{version.replace('.', '-')}-test"
        motd = self.motd or f"✨ {edition[:1].upper()}{edition[1:]} {version} Server by AuraDeploy ✨"
        return self.model_copy(update={
            "edition": edition,
            "version": version,
            "server_name": server_name,
            "motd": motd,
        })


class DeployResponse(BaseModel):
    """Deploy response model"""
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    server_id: Optional[str] = Field(None, alias="serverId")
    status: str
    message: str
    progress_url: Optional[str] = Field(None, alias="progressUrl")
    logs_url: Optional[str] = Field(None, alias="logsUrl")
    command_url: Optional[str] = Field(None, alias="commandUrl")
