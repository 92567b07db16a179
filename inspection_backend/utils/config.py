"""Configuration management for the inspection review backend."""

import os
import yaml
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import List

from .errors import ErrorContext, ErrorType, InspectionReviewError


@dataclass
class PricingConfig:
    """Quote derivation settings."""
    tax_rate: Decimal = Decimal("0.10")
    currency: str = "VND"


@dataclass
class InvoicingConfig:
    """Invoice number and payment term settings."""
    sequence: str = "random"  # "random" | "counter"
    due_days: int = 30


@dataclass
class CompanyConfig:
    """Issuer details printed on invoices."""
    name: str = "ContainerAI Solutions"
    address_lines: List[str] = field(default_factory=lambda: [
        "123 Port Logistics Blvd",
        "Ho Chi Minh City, Vietnam",
    ])
    tax_id: str = "0123456789"
    bank_name: str = "Vietcombank"
    account_name: str = "ContainerAI Corp"
    account_number: str = "1234 5678 9012"


@dataclass
class StorageConfig:
    """Storage paths configuration."""
    data_dir: str = "data/inspections"
    output_dir: str = "data/documents"


@dataclass
class DocumentConfig:
    """Document rendering settings."""
    language: str = "en"
    invariant: bool = True


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: str = ""


@dataclass
class Config:
    """Main configuration class."""
    pricing: PricingConfig
    invoicing: InvoicingConfig
    company: CompanyConfig
    storage: StorageConfig
    documents: DocumentConfig
    logging: LoggingConfig

    @classmethod
    def default(cls) -> "Config":
        """Configuration with built-in defaults and no file."""
        return cls(
            pricing=PricingConfig(),
            invoicing=InvoicingConfig(),
            company=CompanyConfig(),
            storage=StorageConfig(),
            documents=DocumentConfig(),
            logging=LoggingConfig(),
        )

    @classmethod
    def load(cls, config_path: str = "config.yaml") -> "Config":
        """
        Load configuration from file and environment variables.

        Environment variables override config file values:
        - TAX_RATE
        - INVOICE_SEQUENCE
        - INSPECTION_DATA_DIR
        - DOCUMENT_OUTPUT_DIR
        - LOG_LEVEL

        Args:
            config_path: Path to YAML configuration file

        Returns:
            Config instance with loaded settings

        Raises:
            InspectionReviewError: If the file is missing or a value is invalid
        """
        if not os.path.exists(config_path):
            raise InspectionReviewError(ErrorContext(
                error_type=ErrorType.CONFIG_MISSING,
                message=f"Configuration file '{config_path}' not found",
                details={"config_path": config_path}
            ))

        with open(config_path, 'r') as f:
            config_data = yaml.safe_load(f) or {}

        defaults = cls.default()

        pricing_data = config_data.get("pricing", {}) or {}
        raw_rate = os.getenv("TAX_RATE", pricing_data.get("tax_rate", defaults.pricing.tax_rate))
        try:
            tax_rate = Decimal(str(raw_rate))
        except InvalidOperation as e:
            raise InspectionReviewError(ErrorContext(
                error_type=ErrorType.CONFIG_INVALID,
                message=f"Invalid tax rate {raw_rate!r}",
                details={"tax_rate": str(raw_rate)},
                original_exception=e
            ))
        if not tax_rate.is_finite() or tax_rate < 0:
            raise InspectionReviewError(ErrorContext(
                error_type=ErrorType.CONFIG_INVALID,
                message=f"Tax rate must be a non-negative number, got {raw_rate!r}",
                details={"tax_rate": str(raw_rate)}
            ))

        pricing_config = PricingConfig(
            tax_rate=tax_rate,
            currency=pricing_data.get("currency", defaults.pricing.currency)
        )

        invoicing_data = config_data.get("invoicing", {}) or {}
        sequence = os.getenv("INVOICE_SEQUENCE", invoicing_data.get("sequence", defaults.invoicing.sequence))
        if sequence not in ("random", "counter"):
            raise InspectionReviewError(ErrorContext(
                error_type=ErrorType.CONFIG_INVALID,
                message=f"Unknown invoice sequence strategy '{sequence}'",
                details={"sequence": sequence}
            ))

        invoicing_config = InvoicingConfig(
            sequence=sequence,
            due_days=int(invoicing_data.get("due_days", defaults.invoicing.due_days))
        )

        company_data = config_data.get("company", {}) or {}
        company_config = CompanyConfig(
            name=company_data.get("name", defaults.company.name),
            address_lines=list(company_data.get("address_lines", defaults.company.address_lines)),
            tax_id=str(company_data.get("tax_id", defaults.company.tax_id)),
            bank_name=company_data.get("bank_name", defaults.company.bank_name),
            account_name=company_data.get("account_name", defaults.company.account_name),
            account_number=str(company_data.get("account_number", defaults.company.account_number))
        )

        storage_data = config_data.get("storage", {}) or {}
        storage_config = StorageConfig(
            data_dir=os.getenv("INSPECTION_DATA_DIR", storage_data.get("data_dir", defaults.storage.data_dir)),
            output_dir=os.getenv("DOCUMENT_OUTPUT_DIR", storage_data.get("output_dir", defaults.storage.output_dir))
        )

        documents_data = config_data.get("documents", {}) or {}
        document_config = DocumentConfig(
            language=documents_data.get("language", defaults.documents.language),
            invariant=bool(documents_data.get("invariant", defaults.documents.invariant))
        )

        logging_data = config_data.get("logging", {}) or {}
        logging_config = LoggingConfig(
            level=os.getenv("LOG_LEVEL", logging_data.get("level", defaults.logging.level)),
            format=logging_data.get("format", defaults.logging.format),
            file=logging_data.get("file", defaults.logging.file) or ""
        )

        return cls(
            pricing=pricing_config,
            invoicing=invoicing_config,
            company=company_config,
            storage=storage_config,
            documents=document_config,
            logging=logging_config,
        )
