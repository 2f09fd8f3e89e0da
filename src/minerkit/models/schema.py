#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Launch Schema Definitions

Pydantic BaseModel schemas for the values that flow through the launch
pipeline: the catalog descriptor, the device memory check, the utilization
plan and the final worker configuration.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class QuantizationMode(str, Enum):
    """Weight encoding passed to the worker. Values are the literal CLI strings."""
    NONE = "None"
    GPTQ = "gptq"

    def __str__(self):
        return self.value


class ModelDescriptor(BaseModel):
    """Model record resolved from the remote catalog."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Catalog model identifier (the record's 'name')")
    size_gb: Optional[float] = Field(None, gt=0, description="VRAM required to serve the model, in gigabytes")
    quantization: Optional[QuantizationMode] = Field(None, description="Quantization mode derived from the record's 'type'")
    source_model_id: Optional[str] = Field(None, description="HuggingFace repository id ('hf_id')")
    revision: Optional[str] = Field("None", description="HuggingFace branch ('hf_branch'), literal 'None' if absent")

    @property
    def required_mb(self) -> int:
        """Required memory in MB, rounded to the nearest integer."""
        if self.size_gb is None:
            return 0
        return round(self.size_gb * 1024)

    def missing_fields(self) -> List[str]:
        """
        Names of the launch-relevant fields that are not populated.

        A size that rounds to 0 MB counts as missing: it cannot be checked
        against device memory.
        """
        missing = []
        for name in ("size_gb", "quantization", "source_model_id", "revision"):
            value = getattr(self, name)
            if value is None or value == "":
                missing.append(name)
        if self.size_gb is not None and self.required_mb == 0:
            missing.insert(0, "size_gb")
        return missing


class DeviceMemoryState(BaseModel):
    """Free memory observed on a single GPU versus the model requirement."""
    model_config = ConfigDict(frozen=True)

    gpu_index: int = Field(..., ge=0, description="0-based GPU index that was queried")
    available_mb: int = Field(..., ge=0, description="Free device memory in MB")
    required_mb: int = Field(..., ge=0, description="Memory the model needs in MB")

    @property
    def fits(self) -> bool:
        return self.available_mb >= self.required_mb


class UtilizationPlan(BaseModel):
    """GPU memory utilization ratio handed to the inference engine."""
    model_config = ConfigDict(frozen=True)

    ratio: float = Field(..., description="Fraction of device memory the engine may claim")
    rule: str = Field(..., description="Family of the rule that produced the ratio, or 'default'")


class LaunchFlags(BaseModel):
    """Optional trailing flags of the launcher invocation."""
    miner_id_index: int = Field(0, ge=0, description="Index of the miner identity to use")
    port: int = Field(8000, description="Port the worker listens on")
    gpu_ids: str = Field("0", description="Comma-separated GPU ids, e.g. '0,1'")

    @property
    def primary_gpu_index(self) -> int:
        """First GPU id in gpu_ids; this is the device the capacity check runs against."""
        first = self.gpu_ids.split(",")[0].strip()
        return int(first)


class LaunchConfig(BaseModel):
    """Complete parameter set for one worker launch."""
    model_config = ConfigDict(frozen=True, protected_namespaces=())

    source_model_id: str
    quantization: QuantizationMode
    model_id: str
    ratio: float
    revision: str
    miner_id_index: int = Field(0, ge=0)
    port: int = 8000
    gpu_ids: str = "0"

    def to_argv(self) -> List[str]:
        """Positional worker arguments in the order the worker expects."""
        return [
            self.source_model_id,
            self.quantization.value,
            self.model_id,
            f"{self.ratio:.2f}",
            self.revision,
            str(self.miner_id_index),
            str(self.port),
            self.gpu_ids,
        ]
