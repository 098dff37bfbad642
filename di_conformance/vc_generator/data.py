"""Credential templates fixtures are generated from.

Templates are shared by every run and must never be mutated; callers work
on `copy.deepcopy` clones.
"""

VALID_VC = {
    "@context": [
        "https://www.w3.org/ns/credentials/v2",
        {
            "@protected": True,
            "DriverLicenseCredential": "urn:example:DriverLicenseCredential",
            "DriverLicense": {
                "@id": "urn:example:DriverLicense",
                "@context": {
                    "@protected": True,
                    "id": "@id",
                    "type": "@type",
                    "documentIdentifier": "urn:example:documentIdentifier",
                    "dateOfBirth": "urn:example:dateOfBirth",
                    "expirationDate": "urn:example:expiration",
                    "issuingAuthority": "urn:example:issuingAuthority",
                },
            },
            "driverLicense": {"@id": "urn:example:driverLicense", "@type": "@id"},
        },
    ],
    "id": "urn:uuid:36245ee9-9074-4b05-a777-febff2e69757",
    "type": ["VerifiableCredential", "DriverLicenseCredential"],
    "issuer": "did:example:issuer",
    "credentialSubject": {
        "id": "urn:uuid:1a0e4ef5-091f-4060-842e-18e519ab9440",
        "driverLicense": {
            "type": "DriverLicense",
            "documentIdentifier": "T21387yc328c7y32h23f23",
            "dateOfBirth": "01-01-1990",
            "expirationDate": "01-01-2030",
            "issuingAuthority": "VA",
        },
    },
}
