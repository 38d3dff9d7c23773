from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DATA_ROOT = "artifacts/local-autocenter-app/public/data"


class FirebaseConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    project_id: Optional[str] = None
    credentials_path: Optional[str] = None  # service-account JSON; ADC when unset
    region: str = "us-central1"


class RegistryConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    backend: Literal["firestore", "sqlite"] = "firestore"
    collection: str = "device_tokens"
    sqlite_path: str = "~/.autocenter/device_tokens.db"


class GatewayConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    backend: Literal["fcm", "log"] = "fcm"
    dry_run: bool = False
    permanent_error_codes: List[str] = [
        "registration-token-not-registered",
        "invalid-registration-token",
    ]
    transient_error_codes: List[str] = [
        "unavailable",
        "internal-error",
        "deadline-exceeded",
        "message-rate-exceeded",
    ]


class CategoryConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    collection: str
    trigger_status: str
    title: str
    icon: Optional[str] = None
    link: Optional[str] = None  # FCM web push requires an absolute https URL

    @field_validator("link")
    @classmethod
    def validate_link(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.startswith("https://"):
            raise ValueError(f"Notification link must be an https URL, got: {v}")
        return v


class AlignmentConfig(CategoryConfig):
    collection: str = f"{DATA_ROOT}/alignmentQueue"
    trigger_status: str = "Awaiting"
    title: str = "Nova Fila de Alinhamento"
    icon: Optional[str] = "icons/icon-192x192.png"
    recipient_roles: List[str] = ["aligner", "manager"]

    @field_validator("recipient_roles")
    @classmethod
    def validate_roles(cls, v: List[str]) -> List[str]:
        if not v:
            raise ValueError("recipient_roles must name at least one role")
        return v


class ServiceConfig(CategoryConfig):
    collection: str = f"{DATA_ROOT}/serviceJobs"
    trigger_status: str = "Pending"
    title: str = "Novo Serviço Atribuído!"
    icon: Optional[str] = "icons/icon01.png"
    mechanic_role: str = "mecanico"
    description_fallback: str = "Ver detalhes"


class EngineConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    log_level: str = "INFO"
    firebase: FirebaseConfig = Field(default_factory=FirebaseConfig)
    registry: RegistryConfig = Field(default_factory=RegistryConfig)
    gateway: GatewayConfig = Field(default_factory=GatewayConfig)
    alignment: AlignmentConfig = Field(default_factory=AlignmentConfig)
    service: ServiceConfig = Field(default_factory=ServiceConfig)
