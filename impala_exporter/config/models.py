"""Pydantic configuration models for the exporter."""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List

from ..utils.metrics import NodeTarget


class ExporterConfig(BaseModel):
    """Root configuration model for the exporter, built once at startup."""

    model_config = ConfigDict(frozen=True)

    # Hosts may carry their own port ("host:port"); blank entries are skipped
    nodes: List[str] = Field(default_factory=list)
    impala_port: int = Field(default=25000, ge=1, le=65535)
    jmx_path: str = "/jmx"
    exporter_port: int = Field(default=9206, ge=1, le=65535)
    listen_address: str = "0.0.0.0"
    num_workers: int = Field(default=3, ge=1)
    request_timeout_s: float = Field(default=10.0, gt=0)
    target_bean: str = "java.lang:type=GarbageCollector,name=PS MarkSweep"
    namespace: str = "impala"
    subsystem: str = "jmx"
    cluster: str = "impala"
    log_level: str = "INFO"

    @field_validator('nodes', mode='before')
    @classmethod
    def split_nodes(cls, v):
        """Accept a comma-separated string as well as a list."""
        if isinstance(v, str):
            return [part.strip() for part in v.split(",")]
        return v

    @field_validator('jmx_path')
    @classmethod
    def validate_path(cls, v: str) -> str:
        """Ensure the path is absolute."""
        if not v.startswith('/'):
            raise ValueError('jmx_path must start with /')
        return v

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Restrict to standard logging levels."""
        level = v.upper()
        if level not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
            raise ValueError(f'Unknown log level: {v}')
        return level

    def targets(self) -> List[NodeTarget]:
        """
        Build the static node target list.

        Returns:
            List[NodeTarget]: One target per distinct configured node; blank
            nodes get an empty URL so the coordinator skips them
        """
        targets = []
        seen = set()
        for node in self.nodes:
            host = node.strip()
            # Repeated hosts would expose duplicate ip series
            if host in seen:
                continue
            seen.add(host)
            if not host:
                targets.append(NodeTarget(identifier=host, snapshot_url=""))
                continue
            address = host if ":" in host else f"{host}:{self.impala_port}"
            targets.append(NodeTarget(
                identifier=host,
                snapshot_url=f"http://{address}{self.jmx_path}"
            ))
        return targets
