"""Example usage of SwaggerDiff contract validation."""

import copy
import json
from swaggerdiff import (
    AssertionConfig,
    ContractMismatchError,
    ContractValidator,
    DocumentSchemaResolver,
    load_specification,
)

# Hand-written reference documentation
documented = {
    "swagger": "2.0",
    "info": {"title": "Invoices", "version": "1.4.0"},
    "produces": ["application/json"],
    "paths": {
        "/invoices": {
            "get": {
                "parameters": [
                    {"name": "status", "in": "query", "type": "string",
                     "enum": ["paid", "pending"]},
                ],
                "responses": {
                    "200": {
                        "description": "Invoice list",
                        "schema": {"type": "array", "items": {"$ref": "#/definitions/Invoice"}},
                    }
                },
            },
            "post": {
                "consumes": ["application/json"],
                "parameters": [
                    {"name": "invoice", "in": "body", "schema": {"$ref": "#/definitions/Invoice"}},
                ],
                "responses": {"201": {"description": "Created"}},
            },
        },
        "/health": {
            "get": {"responses": {"200": {"description": "OK"}}},
        },
    },
    "definitions": {
        "Invoice": {
            "type": "object",
            "properties": {
                "id": {"type": "string"},
                "total": {"type": "number"},
                "status": {"type": "string", "enum": ["paid", "pending"]},
                "createdAt": {"type": "string", "format": "date-time"},
                "internalNote": {"type": "string"},
            },
        },
    },
}

# Generated from the running service: served under /api, version bumped,
# no /health and no internalNote
generated = {
    "swagger": "2.0",
    "info": {"title": "Invoices", "version": "1.5.0-SNAPSHOT"},
    "produces": ["application/json"],
    "paths": {
        "/api/invoices": copy.deepcopy(documented["paths"]["/invoices"]),
    },
    "definitions": {
        "Invoice": {
            "type": "object",
            "properties": {
                "id": {"type": "string"},
                "total": {"type": "number"},
                "status": {"type": "string", "enum": ["paid", "pending"]},
                "createdAt": {"type": "string", "format": "date-time"},
            },
        },
    },
}


def main():
    print("=" * 60)
    print("SwaggerDiff Contract Validation - Example")
    print("=" * 60)

    config = AssertionConfig(
        paths_prepend_expected="/api",
        paths_to_ignore_in_expected={"/health"},
        properties_to_ignore_in_expected={"Invoice.internalNote"},
    )

    actual = load_specification(generated)
    expected = load_specification(documented)
    validator = ContractValidator(actual, config)
    report = validator.check(expected, DocumentSchemaResolver(actual, expected))

    print(f"\nMatch: {report.is_match}")
    print(f"Checks performed: {report.checks_performed}")

    print("\n" + "-" * 60)
    print("Full JSON Report:")
    print(json.dumps(report.to_dict(), indent=2))


def example_with_mismatch():
    """Example that demonstrates a mismatch."""
    print("\n" + "=" * 60)
    print("Example with Mismatch")
    print("=" * 60)

    drifted = copy.deepcopy(generated)
    invoice = drifted["definitions"]["Invoice"]["properties"]
    invoice["total"] = {"type": "string"}  # Kind changed
    invoice["status"]["enum"] = ["paid", "pending", "void"]  # Enum value added
    del drifted["paths"]["/api/invoices"]["post"]  # Operation removed

    config = AssertionConfig(
        paths_prepend_expected="/api",
        paths_to_ignore_in_expected={"/health"},
        properties_to_ignore_in_expected={"Invoice.internalNote"},
    ).with_assertions(version=True)

    actual = load_specification(drifted)
    expected = load_specification(documented)
    validator = ContractValidator(actual, config)

    try:
        validator.validate(expected, DocumentSchemaResolver(actual, expected))
    except ContractMismatchError as e:
        print(f"\n{e}")
        print(f"\nRecorded on the validator: {len(validator.mismatches)}")


if __name__ == "__main__":
    main()
    example_with_mismatch()
