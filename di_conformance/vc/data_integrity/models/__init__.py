from .proof import DataIntegrityProof, DataIntegrityProofSchema

__all__ = [
    "DataIntegrityProof",
    "DataIntegrityProofSchema",
]
