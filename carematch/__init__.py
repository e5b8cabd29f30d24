"""Local accounts, matches, chats and dashboards for parents and nannies."""
