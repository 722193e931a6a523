#!/usr/bin/env python3
"""
Startup script for container deployments.
Runs migrations and creates the first administrator if configured.
"""

import os
import subprocess


def run_command(cmd: list[str], description: str) -> bool:
    """Run a command and return success status."""
    print(f"\n=== {description} ===")
    try:
        subprocess.run(cmd, check=True)
        return True
    except subprocess.CalledProcessError as e:
        print(f"Warning: {description} failed with code {e.returncode}")
        return False


def main():
    print("\n" + "=" * 50)
    print("PauseGate Startup Script")
    print("=" * 50)

    run_command(["alembic", "upgrade", "head"], "Running database migrations")

    # Create an administrator if environment variables are set
    email = os.environ.get("ADMIN_EMAIL", "").strip()
    password = os.environ.get("ADMIN_PASSWORD", "").strip()

    if email and password:
        name = os.environ.get("ADMIN_NAME", "").strip()

        print("\n=== Creating Administrator ===")
        result = subprocess.run([
            "python", "scripts/create_admin.py",
            "--email", email,
            "--password", password,
            "--name", name,
        ])
        # Don't fail if the administrator already exists
        if result.returncode != 0:
            print("Note: Administrator creation returned non-zero (may already exist)")
    else:
        print("\nSkipping administrator creation (ADMIN_EMAIL/ADMIN_PASSWORD not set)")

    port = os.environ.get("PORT", "8000")
    print(f"\n=== Starting uvicorn on port {port} ===\n")

    os.execvp("uvicorn", [
        "uvicorn",
        "pausegate.main:app",
        "--host", "0.0.0.0",
        "--port", port,
    ])


if __name__ == "__main__":
    main()
