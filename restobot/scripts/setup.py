# restobot/scripts/setup.py
"""Setup script to initialize the application."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from restobot.config import get_settings


def create_directories():
    """Create necessary directories."""
    settings = get_settings()

    directories = [
        settings.STORAGE_DIR,
        settings.backups_dir,
    ]

    for directory in directories:
        directory.mkdir(parents=True, exist_ok=True)
        print(f"✓ Created: {directory}")


def check_env_file(env_path: Path = Path(".env")) -> bool:
    """Check if .env file exists, writing a template if not."""
    if not env_path.exists():
        print("❌ .env file not found!")
        print("Creating template .env file...")

        template = """# API Keys
OPENAI_API_KEY=your_key_here
DEFAULT_MODEL_NAME=gpt-4o-mini

# Storage: json, sql or memory
PERSISTENCE_BACKEND=json

# Offer windows are evaluated in this zone (empty = server local time)
TIMEZONE=

# Debug
DEBUG=True
"""
        env_path.write_text(template)
        print("✓ Created .env template. Please fill in your API keys.")
        return False

    print("✓ .env file configured")
    return True


def main():
    print("=" * 50)
    print("Restobot API - Setup")
    print("=" * 50)

    env_ok = check_env_file()
    create_directories()

    print("\n" + "=" * 50)
    if env_ok:
        print("✓ Setup complete! Ready to run.")
        print("Start server: uvicorn restobot.main:app --reload")
    else:
        print("⚠️  Setup incomplete. Please configure .env file.")
    print("=" * 50)


if __name__ == "__main__":
    main()
