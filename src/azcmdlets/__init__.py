"""
azcmdlets - Azure management commands with record/playback scenario testing.

Packages:
    core: command model, script host, session and client factories
    clients: Azure Stack admin client and models
    commands: shipped Verb-Noun commands
    testing: record/playback harness and scenario runners
"""

__version__ = "0.1.0"
