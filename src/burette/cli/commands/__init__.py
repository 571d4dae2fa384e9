# ABOUTME: Subcommands of the burette CLI, one module per command.
