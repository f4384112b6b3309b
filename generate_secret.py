import argparse
import secrets


def generate_secret_key(length: int = 32):
    """Generate a secure random secret key."""
    return secrets.token_hex(length)


def mint_dev_token(uid: str, email: str = "", name: str = "") -> str:
    """Identity token for local testing; needs SECRET_KEY already set in .env."""
    from companion.core.security import create_identity_token

    return create_identity_token(uid, email=email, name=name)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Generate a SECRET_KEY or a dev identity token.")
    parser.add_argument("--token-for", metavar="UID", help="mint a bearer token for this user id")
    parser.add_argument("--email", default="")
    parser.add_argument("--name", default="")
    args = parser.parse_args()

    if args.token_for:
        print(mint_dev_token(args.token_for, email=args.email, name=args.name))
    else:
        key = generate_secret_key()
        print(f"Generated SECRET_KEY: {key}")
        print("\nCopy this to your .env file: SECRET_KEY=your-generated-key-here")
