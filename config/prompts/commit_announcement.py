"""
Commit Announcement Template - Status text for new GitHub commits.
"""

COMMIT_ANNOUNCEMENT = 'New commit by @{username}: "{message}"\n{url}'
