#!/usr/bin/env python3
"""
Gerrit client - Review Workflow Example

This example walks through a reviewer's day on one topic:
1. Inspect the server and the topic's changes
2. Download each change into a local review branch
3. Vote and comment on every change of the topic
4. Upload a follow-up change to the same topic

Configure with GERRIT_HOST (plus GERRIT_USERNAME/GERRIT_PASSWORD or a
~/.netrc entry) and run from inside a clone of the project:

    python examples/review_workflow.py <topic> [branch]
"""

import logging
import sys

from gerritclient import GerritClient, GitWorkspace, configure_logging
from gerritclient.exceptions import GerritError, TrackingConflict


def main() -> None:
    """Run the review workflow example."""
    if len(sys.argv) < 2:
        print(f"usage: {sys.argv[0]} <topic> [branch]")
        sys.exit(2)
    topic = sys.argv[1]
    branch = sys.argv[2] if len(sys.argv) > 2 else "main"

    configure_logging(level=logging.WARNING)
    print("=== Gerrit Review Workflow Example ===\n")

    client = GerritClient.from_env()
    workspace = GitWorkspace(".")

    try:
        # Step 1: Server and topic
        print("1. Inspecting server and topic...")
        print(f"   Server version: {client.server.version()}")
        changes = client.topics.get_topic_info(topic)
        print(f"   Topic '{topic}' has {len(changes)} open change(s)")
        for change in changes:
            print(f"   - {change.number} {change.project}: {change.subject}")
            for name, label in change.labels.items():
                print(f"       {name}: {label.votes()}")

        # Step 2: Download
        print("\n2. Downloading changes...")
        for change in changes:
            try:
                local = client.download(change.identifier, workspace)
                print(f"   {change.number} -> {local}")
            except TrackingConflict as e:
                print(f"   {change.number} skipped: {e.message}")

        # Step 3: Review the whole topic
        print("\n3. Reviewing topic...")
        result = client.topics.set_code_review(topic, 1, "Looks reasonable, one more pass needed")
        print(f"   Voted on {len(result.succeeded)} change(s)")
        if not result.ok:
            print(f"   Stopped at {result.failed.identifier}: {result.failed.error}")
            print(f"   Not attempted: {[str(s) for s in result.skipped]}")

        reviewers = client.account_directory.usernames()[:2]
        if reviewers:
            client.topics.add_reviewers(topic, reviewers).raise_for_failure()
            print(f"   Added reviewers: {', '.join(reviewers)}")

        # Step 4: Upload
        print("\n4. Uploading follow-up...")
        uploaded = client.upload(workspace, branch, topic=topic, wip=True)
        for change in uploaded:
            print(f"   {change.number}: {change.subject} (wip)")

        print("\n=== Workflow Complete ===")

    except GerritError as e:
        print(f"\nError: [{e.code}] {e.message}")
        sys.exit(1)
    finally:
        client.close()


if __name__ == "__main__":
    main()
