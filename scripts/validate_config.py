#!/usr/bin/env python3
"""Configuration validation script."""

import argparse
import sys
from pathlib import Path
from typing import List

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from autosend_app.config.loader import ConfigLoader
from autosend_app.config.validation import ConfigValidator, ValidationError
from autosend_app.errors import ConfigurationError


def validate_settings_file(loader: ConfigLoader) -> List[ValidationError]:
    """Validate the merged configuration for a settings file."""
    config = loader.merge_config()
    return ConfigValidator.validate_config(config)


def main():
    """Main validation function."""
    parser = argparse.ArgumentParser(description="Validate an autosend.yaml settings file")
    parser.add_argument("config_dir", nargs="?", type=Path, default=None,
                        help="Directory containing autosend.yaml (default: ./config)")
    args = parser.parse_args()

    loader = ConfigLoader.create(args.config_dir)
    print(f"🔍 Validating {loader.settings_file}...")

    all_valid = True

    try:
        errors = validate_settings_file(loader)
    except ConfigurationError as e:
        print(f"❌ Cannot read settings: {e}")
        sys.exit(1)

    if errors:
        print(f"❌ Found {len(errors)} validation errors:")
        for error in errors:
            print(f"  • {error.field}: {error.message} (value: {error.value})")
        all_valid = False
    else:
        print("✅ Settings values are valid")

    print("\n📋 Building settings and transport...")
    try:
        settings = loader.load_settings()
        transport_config = loader.load_transport_config()
        display_names = loader.load_display_names()
    except ConfigurationError as e:
        print(f"❌ {e}")
        all_valid = False
    else:
        enabled = settings.enabled_destinations()
        print(f"✅ {len(enabled)} enabled destination(s), "
              f"{len(settings.active_messages())} message(s)")
        print(f"✅ Transport: {transport_config.method.value}")
        for destination in enabled:
            print(f"  • {display_names.get(destination, destination)}")
        if not enabled:
            print("⚠️  No enabled destinations; start() will refuse to run")

    if all_valid:
        print("\n🎉 Configuration validation passed!")
        sys.exit(0)
    else:
        print("\n❌ Configuration validation failed!")
        sys.exit(1)


if __name__ == "__main__":
    main()
