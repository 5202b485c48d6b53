"""Constants for the estimation and selection engine."""

from enum import Enum


class ModelFamily(str, Enum):
    """Response model families that share probability and likelihood math."""

    BINARY = "binary"
    GRADED = "graded"
    PARTIAL_CREDIT = "partial_credit"


class IRTModel(str, Enum):
    """Item response model tags accepted for a question set."""

    LTM = "ltm"
    TPM = "tpm"
    GRM = "grm"
    GPCM = "gpcm"

    @property
    def family(self) -> ModelFamily:
        """Family used for dispatch; ltm and tpm share the binary 3PL math."""
        if self in (IRTModel.LTM, IRTModel.TPM):
            return ModelFamily.BINARY
        if self is IRTModel.GRM:
            return ModelFamily.GRADED
        return ModelFamily.PARTIAL_CREDIT


class EstimationMethod(str, Enum):
    """Theta point-estimate methods."""

    EAP = "EAP"
    MAP = "MAP"
    MLE = "MLE"


class PriorFamily(str, Enum):
    """Distribution families usable as a prior over theta."""

    NORMAL = "NORMAL"
    CAUCHY = "CAUCHY"
    STUDENT_T = "STUDENT_T"
