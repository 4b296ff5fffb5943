from importlib.metadata import PackageNotFoundError, version

from a11ytool.core.models import PackageInfo

DISTRIBUTION_NAME = "a11y-tool"
FALLBACK_VERSION = "1.0.4"  # keep in step with a11ytool.__version__


def get_package_info() -> PackageInfo:
    """Identity reported to the authorization endpoint and usage record"""
    try:
        return PackageInfo(name=DISTRIBUTION_NAME, version=version(DISTRIBUTION_NAME))
    except PackageNotFoundError:
        return PackageInfo(name=DISTRIBUTION_NAME, version=FALLBACK_VERSION)
