#!/usr/bin/env python3
"""
Wrapper script to run the k8ssandra-operator with Kopf.

Usage:
    python run_operator.py [any kopf run arguments]

Examples:
    python run_operator.py --verbose --all-namespaces
    python run_operator.py -n k8ssandra --log-format=json
"""
import sys

if __name__ == '__main__':
    import kopf.cli

    # Registers handlers, including startup and cleanup
    import k8ssandra.app  # noqa: F401

    # Behave as if the user called: kopf run <args>
    sys.argv.insert(1, 'run')

    sys.exit(kopf.cli.main(prog_name="kopf"))
