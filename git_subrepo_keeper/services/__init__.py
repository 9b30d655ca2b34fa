"""Services for git-subrepo-keeper."""
