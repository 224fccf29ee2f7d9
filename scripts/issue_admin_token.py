"""
Script to issue an access token for a dashboard operator
Usage: python scripts/issue_admin_token.py staff@example.com [hours]
"""

import sys
import os
from datetime import timedelta

# Add project root to Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

# Now import
from flask_jwt_extended import create_access_token
from app import create_app


def issue_token(email, hours=None):
    """Mint a JWT whose identity is the operator's email"""
    app = create_app()

    with app.app_context():
        expires = timedelta(hours=hours) if hours else None
        token = create_access_token(identity=email, expires_delta=expires)

        print(f"✅ Token issued for '{email}'")
        print(f"   Expires in: {expires or app.config['JWT_ACCESS_TOKEN_EXPIRES']}")
        print(f"\nAuthorization: Bearer {token}")
        return token

if __name__ == '__main__':
    if len(sys.argv) < 2:
        print("Usage: python scripts/issue_admin_token.py <email> [hours]")
        print("Example: python scripts/issue_admin_token.py contact@coconutroads.com 24")
        sys.exit(1)

    email = sys.argv[1]
    hours = int(sys.argv[2]) if len(sys.argv) > 2 else None
    issue_token(email, hours)
