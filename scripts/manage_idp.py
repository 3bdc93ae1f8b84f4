"""
Drive an identity provider resource through its lifecycle from the command line.

The declaration file holds {"type": "okta_idp_social", "config": {...}} and the
state file holds {"type": ..., "attributes": {...}}; the state file is written
after every command.
"""
import argparse
import json
import os
import sys

from idp_provider.config import settings
from idp_provider.errors import OktaAPIError, ResourceValidationError
from idp_provider.provider import Provider, configure_logging

def load_json(path):
    if not path or not os.path.exists(path):
        return {}
    with open(path) as f:
        return json.load(f)

def save_state(path, resource_type, attributes):
    with open(path, "w") as f:
        json.dump({"type": resource_type, "attributes": attributes}, f, indent=2, sort_keys=True)
    print(f"State written to {path}")

def apply(provider, client, args):
    declaration = load_json(args.config)
    resource_type = declaration["type"]
    resource = provider.resource(resource_type)
    prior = load_json(args.state).get("attributes", {})

    d = resource.data(config=declaration.get("config", {}), state=prior)
    if d.id:
        print(f"Updating {resource_type} {d.id}")
        resource.update(d, client)
    else:
        print(f"Creating {resource_type}")
        resource.create(d, client)

    if not d.id:
        print(f"{resource_type} disappeared during apply, run apply again to recreate it")
    save_state(args.state, resource_type, d.state())

def refresh(provider, client, args):
    current = load_json(args.state)
    resource = provider.resource(current["type"])
    d = resource.data(state=current.get("attributes", {}))

    if resource.exists is not None and not resource.exists(d, client):
        print(f"{d.id} no longer exists")
        save_state(args.state, current["type"], {})
        return

    resource.read(d, client)
    save_state(args.state, current["type"], d.state())

def destroy(provider, client, args):
    current = load_json(args.state)
    resource = provider.resource(current["type"])
    d = resource.data(state=current.get("attributes", {}))

    if not d.id:
        print("Nothing to destroy.")
        return

    resource.delete(d, client)
    print(f"Destroyed {d.id}")
    save_state(args.state, current["type"], {})

def import_idp(provider, client, args):
    resource = provider.resource(args.type)
    states = resource.import_state(args.id, client)
    if not states:
        print(f"Identity provider {args.id} not found. Exiting.")
        sys.exit(1)
    save_state(args.state, args.type, states[0])

def main(argv=None):
    parser = argparse.ArgumentParser(description="Manage Okta identity providers")
    parser.add_argument("--state", default="idp.state.json")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("apply")
    p.add_argument("config")
    p.set_defaults(func=apply)

    sub.add_parser("refresh").set_defaults(func=refresh)
    sub.add_parser("destroy").set_defaults(func=destroy)

    p = sub.add_parser("import")
    p.add_argument("type")
    p.add_argument("id")
    p.set_defaults(func=import_idp)

    args = parser.parse_args(argv)
    configure_logging()

    if not settings.OKTA_API_TOKEN:
        print("OKTA_API_TOKEN is not set. Exiting.")
        sys.exit(1)

    provider = Provider()
    client = provider.configure(settings)
    try:
        args.func(provider, client, args)
    except ResourceValidationError as e:
        for error in e.errors:
            print(f"Invalid declaration: {error}")
        sys.exit(1)
    except OktaAPIError as e:
        print(f"Okta rejected the request: {e}")
        sys.exit(1)
    finally:
        client.close()

if __name__ == "__main__":
    main()
