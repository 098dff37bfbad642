from .base import Cryptosuite, CryptosuiteError, ProofVerification
from .eddsa_jcs_2022 import EddsaJcs2022

CRYPTOSUITES = {
    "eddsa-jcs-2022": EddsaJcs2022,
}

__all__ = [
    "CRYPTOSUITES",
    "Cryptosuite",
    "CryptosuiteError",
    "EddsaJcs2022",
    "ProofVerification",
]
