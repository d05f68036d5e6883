#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the pagereflow library.

This module defines the failure kinds the conversion engine distinguishes.
Some of them are always surfaced to the caller, others are purely internal
and are always recovered locally.

Exception Hierarchy
-------------------
- PageReflowError (base exception)

  - ValidationError (parameter/option validation)

  - FormatError (unsupported source format)

  - DocumentUnreadable (source cannot be opened or parsed, surfaced)

  - GeometryUnavailable (page geometry lookup failed, recovered into A4)

  - MarkerInconsistency (markers do not fit the reference, recovered by
    falling back to free layout)

  - ConversionFailed (output construction failed, surfaced after the
    partial output is deleted)

  - DependencyError (missing/incompatible packages)

"""

from typing import Any


class PageReflowError(Exception):
    """Base exception class for all pagereflow-specific errors.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    Attributes
    ----------
    message : str
        The error message
    original_error : Exception or None
        The wrapped original exception, if any

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(PageReflowError):
    """Exception raised for invalid input parameters or options.

    Parameters
    ----------
    message : str
        Description of the validation error
    parameter_name : str, optional
        Name of the invalid parameter
    parameter_value : any, optional
        The invalid value that was provided
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        """Initialize the validation error with parameter details."""
        super().__init__(message, original_error=original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value


class FormatError(PageReflowError):
    """Exception raised when a source format has no plain-text extractor.

    Parameters
    ----------
    message : str, optional
        Custom error message
    format_type : str, optional
        The unsupported format (file extension or declared format name)
    supported_formats : list[str], optional
        Formats that are supported, for reference
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str | None = None,
        format_type: str | None = None,
        supported_formats: list[str] | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the format error."""
        if message is None:
            if format_type:
                message = f"Unsupported format: '{format_type}'"
                if supported_formats:
                    message += f". Supported formats: {', '.join(supported_formats)}"
            else:
                message = "File format is not supported for plain-text extraction"

        super().__init__(message, original_error=original_error)
        self.format_type = format_type
        self.supported_formats = supported_formats


class DocumentUnreadable(PageReflowError):
    """Exception raised when a source document cannot be opened or parsed.

    Raised by the extractor for missing, corrupt or locked documents. Unlike
    geometry lookups this is never silently defaulted.

    Parameters
    ----------
    message : str
        Description of what went wrong
    file_path : str, optional
        Path to the unreadable document
    original_error : Exception, optional
        The original exception that caused this error

    Attributes
    ----------
    file_path : str or None
        Path to the document that could not be read

    """

    def __init__(self, message: str, file_path: str | None = None, original_error: Exception | None = None):
        """Initialize the error with the offending path."""
        super().__init__(message, original_error=original_error)
        self.file_path = file_path


class GeometryUnavailable(PageReflowError):
    """Exception raised when a page's size cannot be determined.

    Internal only: the geometry resolver always recovers it into the A4
    default and reports it through logging.

    Parameters
    ----------
    message : str
        Description of the lookup failure
    file_path : str, optional
        Document that was queried
    page_number : int, optional
        1-based page number that was requested
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str,
        file_path: str | None = None,
        page_number: int | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the geometry error."""
        super().__init__(message, original_error=original_error)
        self.file_path = file_path
        self.page_number = page_number


class MarkerInconsistency(PageReflowError):
    """Exception raised when page markers do not fit the reference document.

    Internal only: matched-mode writing recovers from it by switching to
    free layout.

    Parameters
    ----------
    message : str
        Description of the mismatch
    segment_count : int
        Number of segments derived from the markers
    reference_page_count : int
        Number of pages in the reference document

    """

    def __init__(self, message: str, segment_count: int, reference_page_count: int):
        """Initialize with the mismatching counts."""
        super().__init__(message)
        self.segment_count = segment_count
        self.reference_page_count = reference_page_count


class ConversionFailed(PageReflowError):
    """Exception raised when building the output document fails.

    Any partially written artifact has already been deleted by the time
    this exception reaches the caller.

    Parameters
    ----------
    message : str
        Description of the failure
    output_path : str, optional
        The destination that was being written
    conversion_stage : str, optional
        Stage of conversion where the failure happened (e.g. "layout", "render")
    original_error : Exception, optional
        The underlying exception

    """

    def __init__(
        self,
        message: str,
        output_path: str | None = None,
        conversion_stage: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the conversion error."""
        super().__init__(message, original_error=original_error)
        self.output_path = output_path
        self.conversion_stage = conversion_stage


class DependencyError(PageReflowError):
    """Exception raised when required dependencies are not available.

    Parameters
    ----------
    converter_name : str
        Name of the component requiring dependencies
    missing_packages : list[tuple[str, str]]
        List of (package_name, version_spec) tuples for missing packages
    version_mismatches : list[tuple[str, str, str]], optional
        List of (package_name, required_version, installed_version) tuples
    message : str, optional
        Custom error message. If not provided, generates a helpful message
    original_import_error : ImportError, optional
        The first ImportError encountered

    """

    def __init__(
        self,
        converter_name: str,
        missing_packages: list[tuple[str, str]],
        version_mismatches: list[tuple[str, str, str]] | None = None,
        message: str | None = None,
        original_import_error: ImportError | None = None,
    ):
        """Initialize the dependency error with package details."""
        version_mismatches = version_mismatches or []
        self.original_import_error = original_import_error
        if message is None:
            message_parts = []

            if missing_packages:
                pkg_list = ", ".join(f"'{name}{spec}'" if spec else f"'{name}'" for name, spec in missing_packages)
                message_parts.append(f"{converter_name} requires the following packages: {pkg_list}")

            if version_mismatches:
                mismatch_str = ", ".join(
                    f"'{name}' (requires {required}, but {installed} is installed)"
                    for name, required, installed in version_mismatches
                )
                message_parts.append(f"{converter_name} has version mismatches: {mismatch_str}")

            message = "\n".join(message_parts)

            all_packages = missing_packages + [(name, req) for name, req, _ in version_mismatches]
            if all_packages:
                packages_str = " ".join(f'"{name}{spec}"' if spec else name for name, spec in all_packages)
                message += f"\nInstall with: pip install --upgrade {packages_str}"

        super().__init__(message)
        self.converter_name = converter_name
        self.missing_packages = missing_packages
        self.version_mismatches = version_mismatches


__all__ = [
    "PageReflowError",
    "ValidationError",
    "FormatError",
    "DocumentUnreadable",
    "GeometryUnavailable",
    "MarkerInconsistency",
    "ConversionFailed",
    "DependencyError",
]
