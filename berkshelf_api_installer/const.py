"""Constants used throughout the installer."""

# Upstream source repository used for git installs
BERKSHELF_API_REPOSITORY = "https://github.com/berkshelf/berkshelf-api.git"

# Gem and executable names
BERKSHELF_API_GEM = "berkshelf-api"
BERKSHELF_API_BINARY = "berks-api"
BUNDLER_GEM = "bundler"

# Name of the runit service
SERVICE_NAME = "berkshelf-api"

# Files inside the server path and the git checkout
CONFIG_FILENAME = "config.json"
GEMFILE = "Gemfile"
GEMFILE_LOCK = "Gemfile.lock"
BINSTUBS_DIR = "vendor/bin"

# Ownership of config.json, never the service user
CONFIG_OWNER = "root"
CONFIG_MODE = 0o640

# Version strings of this form are released gems; anything else is a git ref
RELEASE_VERSION_PATTERN = r"^\d+(\.\d+(\.\d+)?)?$"

# libarchive packages per platform family
LIBARCHIVE_PACKAGES = {
    "rhel": ["libarchive", "libarchive-devel"],
    "debian": ["libarchive12", "libarchive-dev"],
}
