"""Command line option parsing."""

import abc
from typing import Optional, Type

from configargparse import ArgumentParser, Namespace, YAMLConfigFileParser

from ..vc_generator.generators import OptionalTestCategory
from .base import ArgsParseError

CAT_RUN = "run"

DEFAULT_TAG = "eddsa-2022"
DEFAULT_SUITE_NAME = "eddsa-2022"
DEFAULT_REFERENCE_VENDOR = "Digital Bazaar"


class ArgumentGroup(abc.ABC):
    """A class representing a group of related command line arguments."""

    GROUP_NAME = None

    @abc.abstractmethod
    def add_arguments(self, parser: ArgumentParser):
        """Add arguments to the provided argument parser."""

    @abc.abstractmethod
    def get_settings(self, args: Namespace) -> dict:
        """Extract settings from the parsed arguments."""


class group:
    """Decorator for registering argument groups."""

    _registered = []

    def __init__(self, *categories):
        """Initialize the decorator."""
        self.categories = tuple(categories)

    def __call__(self, group_cls: ArgumentGroup):
        """Register a class in the given categories."""
        setattr(group_cls, "CATEGORIES", self.categories)
        self._registered.append((self.categories, group_cls))
        return group_cls

    @classmethod
    def get_registered(cls, category: Optional[str] = None):
        """Fetch the set of registered classes in a category."""
        return (
            grp
            for (cats, grp) in cls._registered
            if category is None or category in cats
        )


def create_argument_parser(*, prog: Optional[str] = None):
    """Create an instance of an arg parser, force yaml format for external config."""
    return ArgumentParser(config_file_parser_class=YAMLConfigFileParser, prog=prog)


def load_argument_groups(parser: ArgumentParser, *groups: Type[ArgumentGroup]):
    """Load a set of argument groups into a parser.

    Returns:
        A callable to convert loaded arguments into a settings dictionary

    """
    group_inst = []
    for group in groups:
        g_parser = parser.add_argument_group(group.GROUP_NAME)
        inst = group()
        inst.add_arguments(g_parser)
        group_inst.append(inst)

    def get_settings(args: Namespace):
        settings = {}
        try:
            for group in group_inst:
                settings.update(group.get_settings(args))
        except ArgsParseError as e:
            parser.print_help()
            raise e
        return settings

    return get_settings


@group(CAT_RUN)
class GeneralGroup(ArgumentGroup):
    """General settings."""

    GROUP_NAME = "General"

    def add_arguments(self, parser: ArgumentParser):
        """Add general command line arguments to the parser."""
        parser.add_argument(
            "--arg-file",
            is_config_file=True,
            help=(
                "Load argument values from the given YAML file. "
                "Command line options override values from the file."
            ),
        )
        parser.add_argument(
            "--report-file",
            dest="report_file",
            type=str,
            metavar="<path>",
            env_var="DI_CONFORMANCE_REPORT_FILE",
            help="Also write the interop matrices as JSON to <path>.",
        )

    def get_settings(self, args: Namespace) -> dict:
        """Extract general settings."""
        settings = {}
        if args.report_file:
            settings["report.file"] = args.report_file
        return settings


@group(CAT_RUN)
class ImplementationsGroup(ArgumentGroup):
    """Vendor implementation settings."""

    GROUP_NAME = "Implementations"

    def add_arguments(self, parser: ArgumentParser):
        """Add implementation command line arguments to the parser."""
        parser.add_argument(
            "--implementations",
            dest="implementations",
            type=str,
            metavar="<path>",
            env_var="DI_CONFORMANCE_IMPLEMENTATIONS",
            help=(
                "YAML or JSON file listing the vendor implementations and "
                "their tagged issuer and verifier endpoints."
            ),
        )
        parser.add_argument(
            "--tag",
            dest="tags",
            type=str,
            action="append",
            metavar="<tag>",
            env_var="DI_CONFORMANCE_TAGS",
            help=(
                "Run against the endpoints carrying this tag. "
                f"May be repeated. Default: {DEFAULT_TAG}."
            ),
        )
        parser.add_argument(
            "--reference-vendor",
            dest="reference_vendor",
            type=str,
            metavar="<name>",
            default=DEFAULT_REFERENCE_VENDOR,
            env_var="DI_CONFORMANCE_REFERENCE_VENDOR",
            help=(
                "Vendor whose issuer provides the valid credential handed to "
                f"verifiers. Default: {DEFAULT_REFERENCE_VENDOR}."
            ),
        )

    def get_settings(self, args: Namespace) -> dict:
        """Extract implementation settings."""
        if not args.implementations:
            raise ArgsParseError("Parameter --implementations is required")
        tags = []
        for value in args.tags or [DEFAULT_TAG]:
            tags.extend(tag.strip() for tag in value.split(",") if tag.strip())
        return {
            "implementations.file": args.implementations,
            "implementations.tags": tags,
            "implementations.reference_vendor": args.reference_vendor,
        }


@group(CAT_RUN)
class SuiteGroup(ArgumentGroup):
    """Fixture and proof format settings."""

    GROUP_NAME = "Suite"

    def add_arguments(self, parser: ArgumentParser):
        """Add suite command line arguments to the parser."""
        parser.add_argument(
            "--suite-name",
            dest="suite_name",
            type=str,
            metavar="<name>",
            default=DEFAULT_SUITE_NAME,
            env_var="DI_CONFORMANCE_SUITE_NAME",
            help=f"Name the generated fixtures are cached under. Default: {DEFAULT_SUITE_NAME}.",
        )
        parser.add_argument(
            "--expected-proof-type",
            dest="expected_proof_types",
            type=str,
            action="append",
            metavar="<type>",
            help=(
                "Accepted value of proof.type. May be repeated. "
                "Default: DataIntegrityProof."
            ),
        )
        parser.add_argument(
            "--no-cryptosuite",
            action="store_true",
            env_var="DI_CONFORMANCE_NO_CRYPTOSUITE",
            help="Do not require proof.cryptosuite on issued proofs.",
        )
        parser.add_argument(
            "--legacy-type-match",
            action="store_true",
            env_var="DI_CONFORMANCE_LEGACY_TYPE_MATCH",
            help=(
                "Deprecated. Require proof.type to equal the comma joined "
                "expected proof types."
            ),
        )
        parser.add_argument(
            "--optional-test",
            dest="optional_tests",
            type=str,
            action="append",
            metavar="<category>",
            choices=[category.value for category in OptionalTestCategory],
            help="Also generate the fixtures of an optional category. May be repeated.",
        )
        parser.add_argument(
            "--mandatory-pointer",
            dest="mandatory_pointers",
            type=str,
            action="append",
            metavar="<json-pointer>",
            help="JSON pointer always disclosed by derived proofs. May be repeated.",
        )
        parser.add_argument(
            "--selective-pointer",
            dest="selective_pointers",
            type=str,
            action="append",
            metavar="<json-pointer>",
            help="JSON pointer selectively disclosed. May be repeated.",
        )
        parser.add_argument(
            "--verify",
            action="store_true",
            env_var="DI_CONFORMANCE_VERIFY",
            help="Verify every generated proof before caching it.",
        )

    def get_settings(self, args: Namespace) -> dict:
        """Extract suite settings."""
        settings = {
            "suite.name": args.suite_name,
            "expected.crypto_suite": not args.no_cryptosuite,
            "expected.profile": (
                "legacy-exact-match" if args.legacy_type_match else "set-membership"
            ),
            "suite.verify": bool(args.verify),
        }
        if args.expected_proof_types:
            settings["expected.proof_types"] = args.expected_proof_types
        if args.optional_tests:
            settings["suite.optional_tests"] = args.optional_tests
        if args.mandatory_pointers:
            settings["suite.mandatory_pointers"] = args.mandatory_pointers
        if args.selective_pointers:
            settings["suite.selective_pointers"] = args.selective_pointers
        return settings


@group(CAT_RUN)
class KeyGroup(ArgumentGroup):
    """Fixture signing key settings."""

    GROUP_NAME = "Key"

    def add_arguments(self, parser: ArgumentParser):
        """Add key command line arguments to the parser."""
        parser.add_argument(
            "--key-seed",
            dest="key_seed",
            type=str,
            metavar="<seed>",
            env_var="DI_CONFORMANCE_KEY_SEED",
            help=(
                "32 byte seed, or its base64 encoding, the fixture signing key "
                "is derived from. Default: all zeros."
            ),
        )

    def get_settings(self, args: Namespace) -> dict:
        """Extract key settings."""
        settings = {}
        if args.key_seed:
            settings["key.seed"] = args.key_seed
        return settings


@group(CAT_RUN)
class LoggingGroup(ArgumentGroup):
    """Logging settings."""

    GROUP_NAME = "Logging"

    def add_arguments(self, parser: ArgumentParser):
        """Add logging-specific command line arguments to the parser."""
        parser.add_argument(
            "--log-config",
            dest="log_config",
            type=str,
            metavar="<path-to-config>",
            default=None,
            env_var="DI_CONFORMANCE_LOG_CONFIG",
            help="Specifies a custom logging configuration file",
        )
        parser.add_argument(
            "--log-file",
            dest="log_file",
            type=str,
            metavar="<log-file>",
            default=None,
            env_var="DI_CONFORMANCE_LOG_FILE",
            help="Also write log records to the named <log-file>.",
        )
        parser.add_argument(
            "--log-level",
            dest="log_level",
            type=str,
            metavar="<log-level>",
            default=None,
            env_var="DI_CONFORMANCE_LOG_LEVEL",
            help=(
                "Specifies a custom logging level as one of: "
                "('debug', 'info', 'warning', 'error', 'critical')"
            ),
        )
        parser.add_argument(
            "--log-json",
            action="store_true",
            env_var="DI_CONFORMANCE_LOG_JSON",
            help="Format log records as JSON.",
        )

    def get_settings(self, args: Namespace) -> dict:
        """Extract logging settings."""
        settings = {}
        if args.log_config:
            settings["log.config"] = args.log_config
        if args.log_file:
            settings["log.file"] = args.log_file
        if args.log_level:
            settings["log.level"] = args.log_level
        if args.log_json:
            settings["log.json"] = True
        return settings

