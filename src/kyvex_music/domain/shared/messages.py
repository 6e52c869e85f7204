"""Centralized message constants for error messages, log templates, and user feedback."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions and validation failures."""

    # Discord ID Validation Errors
    INVALID_SNOWFLAKE = "Discord snowflake ID must be positive"
    SNOWFLAKE_TOO_LARGE = "Discord snowflake ID exceeds maximum value (2^64)"

    # Session Preconditions
    NOT_IN_VOICE = "You must be in a voice channel!"
    SERVER_ONLY = "This command only works in a server."

    # Session State
    NOTHING_PLAYING = "Nothing is playing!"
    NO_CURRENT_TRACK = "No track is currently playing!"
    NO_ACTIVE_PLAYER = "No active player found!"
    NOTHING_TO_SKIP = "No more tracks in queue to skip to!"
    ALREADY_PAUSED = "The player is already paused!"
    ALREADY_PLAYING = "The player is already playing!"
    QUEUE_EMPTY = "Queue is empty! Add some tracks with the play command."
    QUEUE_ALREADY_EMPTY = "Queue is already empty!"
    NOT_ENOUGH_TO_SHUFFLE = "Not enough tracks in queue to shuffle!"

    # Argument Validation
    SEARCH_QUERY_REQUIRED = "Please provide a search query!"
    NO_RESULTS = "No results found! Try with a different search term."
    INVALID_VOLUME = "Please provide a valid volume between 0 and 100!"
    INVALID_POSITION = "Please provide a valid track position between 1 and {length}!"
    INVALID_PAGE = "Please provide a valid page number between 1 and {pages}!"
    INVALID_PREFIX = "Prefix must be 1 to {max_length} characters with no spaces."

    # Permissions
    PERMISSION_DENIED = "You do not have permission to use this command!"

    # Activity
    ACTIVITY_USAGE = "Usage: `{prefix}setactivity <type> <name>`\nTypes: playing, listening, watching, competing"
    ACTIVITY_STREAMING_USAGE = "Usage: `{prefix}setactivity streaming <name> <url>` (URL required)"
    ACTIVITY_STREAMING_URL_REQUIRED = (
        "For 'streaming' activity, you must provide a valid URL (e.g., Twitch or YouTube). "
        "Usage: `{prefix}setactivity streaming <name> <url>`"
    )
    ACTIVITY_STREAMING_URL_INVALID = "Streaming URL must be a valid Twitch or YouTube link."
    ACTIVITY_TYPE_INVALID = (
        "Invalid activity type. Please use: playing, listening, watching, competing, or streaming."
    )

    # External Failures
    PLAY_FAILED = "An error occurred while playing the track! Please try again later."
    VOICE_CONNECT_FAILED = "I couldn't join your voice channel."
    PLAYER_UNAVAILABLE = "The audio player is unavailable right now. Please try again later."
    COMMAND_FAILED = "Something went wrong running that command."

    # Configuration Errors
    DISCORD_TOKEN_REQUIRED = "DISCORD_TOKEN environment variable is required"
    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"
    INVALID_EMBED_COLOR = "Embed color must look like #RRGGBB"
    CONTAINER_NOT_FOUND = "Container not found on bot instance"


class LogTemplates:
    """Log message templates for structured logging.

    Use these with logger.info(), logger.error(), etc. and pass values as parameters.
    """

    # Bot Lifecycle
    BOT_STARTING = "Starting Kyvex Music (%s)..."
    BOT_STARTING_RUN = "Connecting to Discord..."
    STARTUP_LAVALINK_NODE = "Lavalink node %r at %s, searching with %s"
    STARTUP_PREFIXES = "Default prefix %r, guild prefixes stored in %s"
    STARTUP_NO_OWNERS = "No owner ids configured; owner-only commands are disabled"
    STARTUP_NO_LOG_CHANNEL = "No log channel configured; events are only written to the console"
    STARTUP_DEFAULT_LAVALINK_PASSWORD = "Lavalink password is still the default in production"
    BOT_STOPPED = "Bot stopped"
    BOT_KEYBOARD_INTERRUPT = "Interrupted by keyboard"
    BOT_FATAL_ERROR = "Fatal error: %s"
    BOT_SETUP = "Running setup hook"
    BOT_SETUP_COMPLETE = "Setup complete"
    BOT_COG_LOADED = "Loaded extension %s"
    BOT_COG_LOAD_FAILED = "Failed to load extension %s: %s"
    BOT_COGS_LOADED_SUMMARY = "Extensions loaded: %d ok, %d failed"
    BOT_READY = "Logged in as %s (%s)"
    BOT_CONNECTED_GUILDS = "Connected to %d guild(s)"
    BOT_SHUTTING_DOWN = "Shutting down..."
    BOT_SHUTDOWN_TIMEOUT = "Graceful shutdown timed out after %.1fs"
    BOT_SHUTDOWN_COMPLETE = "Shutdown complete"
    BOT_CONTAINER_SHUTDOWN = "Container shut down"
    BOT_CONTAINER_SHUTDOWN_ERROR = "Error shutting down container: %s"
    BOT_PRESENCE_SET = "Presence set to %s %s"

    # Lavalink Nodes
    NODE_CONNECTING = "Connecting to Lavalink node %s at %s"
    NODE_CONNECT_FAILED = "Could not connect to Lavalink node %s: %s"
    NODE_READY = "Lavalink node %s ready (resumed=%s)"
    NODE_CLOSED = "Lavalink node %s closed"

    # Commands
    COMMAND_RECEIVED = "Command %s from %s in guild %s"
    COMMAND_REJECTED = "Command %s rejected in guild %s: %s"
    COMMAND_EXTERNAL_FAILURE = "Command %s in guild %s failed in %s"
    COMMAND_UNEXPECTED_ERROR = "Unexpected error running %s in guild %s"
    CONTROL_IGNORED = "Ignored %s control from %s in guild %s"
    CONTROL_PRESSED = "Control %s pressed by %s in guild %s"

    # Playback
    SESSION_CREATED = "Created session for guild %s (voice=%s, text=%s)"
    SESSION_DESTROYED = "Destroyed session for guild %s (%s)"
    PLAYBACK_STARTED = "Started playing '%s' in guild %s"
    PLAYBACK_PAUSED = "Paused playback in guild %s"
    PLAYBACK_RESUMED = "Resumed playback in guild %s"
    PLAYBACK_SKIPPED = "Skipped '%s' in guild %s"
    PLAYBACK_ADVANCED = "Advanced to '%s' in guild %s"
    PLAYBACK_VOLUME = "Volume set to %d in guild %s"
    PLAYBACK_ROLLBACK = "Rolled back %s in guild %s after backend failure"
    TRACK_END_IGNORED = "Ignored track end (%s) in guild %s"
    TRACK_START_STALE = "Ignored stale track start %s in guild %s"
    TRACK_END_NO_SESSION = "Track ended in guild %s with no session"
    TRACK_EXCEPTION = "Track exception in guild %s: %s"
    TRACK_STUCK = "Track stuck in guild %s after %sms"
    QUEUE_ENDED = "Queue ended in guild %s"
    ITEMS_ENQUEUED = "Enqueued %d item(s) in guild %s"

    # Transient Messages
    MESSAGE_ALREADY_DELETED = "Message %s in channel %s was already deleted"
    MESSAGE_DELETE_FAILED = "Failed deleting message %s in channel %s: %s"
    MESSAGE_SEND_FAILED = "Failed sending message to channel %s: %s"
    MESSAGE_CHANNEL_MISSING = "Channel %s for guild %s is not available"
    MESSAGES_FLUSHED = "Flushed %d transient message(s) in guild %s"

    # Prefixes
    PREFIXES_LOADED = "Loaded %d guild prefix(es) from %s"
    PREFIXES_FILE_CREATED = "Prefix file %s not found, created an empty one"
    PREFIXES_LOAD_FAILED = "Could not read prefix file %s: %s"
    PREFIX_SAVED = "Prefix for guild %s set to %r and saved"
    PREFIX_SAVE_FAILED = "Could not save prefix file %s: %s"

    # Log Channel
    LOG_CHANNEL_UNSET = "Log channel not configured, skipping channel logging"
    LOG_CHANNEL_MISSING = "Log channel %s not found"
    LOG_CHANNEL_SEND_FAILED = "Failed to send log to channel %s: %s"

    # Guilds / Voice
    GUILD_JOINED = "Joined guild: %s (%s)"
    GUILD_LEFT = "Left guild: %s (%s)"
    BOT_VOICE_LEFT = "Bot left voice in guild %s"
    ACTIVITY_CHANGED = "Activity changed by %s to %s %s"


class DiscordUIMessages:
    """User-facing Discord messages and responses.

    These strings are shown directly to users. Keep them concise and include emoji.
    """

    # Notice wrappers
    NOTICE_SUCCESS = "✅ | {message}"
    NOTICE_ERROR = "❌ | {message}"
    NOTICE_INFO = "ℹ️ | {message}"

    # Success Messages
    SUCCESS_SKIPPED = "Skipped the current track!"
    SUCCESS_STOPPED = "Stopped the music and cleared the queue!"
    SUCCESS_PAUSED = "Paused the music!"
    SUCCESS_RESUMED = "Resumed the music!"
    SUCCESS_VOLUME = "Set volume to {volume}%"
    SUCCESS_SHUFFLED = "\U0001f500 Shuffled the queue!"
    SUCCESS_LOOP_ENABLED = "Enabled loop mode!"
    SUCCESS_LOOP_DISABLED = "Disabled loop mode!"
    SUCCESS_REMOVED = "Removed **{title}** from the queue!"
    SUCCESS_CLEARED = "Cleared the queue!"
    SUCCESS_PREFIX_SET = "Prefix for this server is now `{prefix}`"
    SUCCESS_ACTIVITY_SET = "Bot activity set to: **{activity_type} {name}**"
    SUCCESS_ACTIVITY_SET_URL = "Bot activity set to: **{activity_type} {name}** (URL: {url})"
    SUCCESS_PONG = "{emoji} Pong: {latency_ms} ms"

    # Info
    INFO_CURRENT_PREFIX = "Current prefix is `{prefix}`. Use `{prefix}prefix <new>` to change it."
    INFO_QUEUE_ENDED = "Queue has ended. Leaving voice channel."
    INFO_NO_UPDATES = "Sorry, no updates are available yet!"

    # Embed Titles
    EMBED_NOW_PLAYING = "\U0001f3b5 Now Playing"
    EMBED_ADDED_PLAYLIST = "✅ Added Playlist"
    EMBED_QUEUE = "\U0001f4cb Music Queue"
    EMBED_PLAYER_STATUS = "ℹ️ Player Status"
    EMBED_HELP = "ℹ️ Available Commands"
    EMBED_UPDATES = "\U0001f195 Bot Updates & Changelog"
    EMBED_UPTIME = "⏱️ Uptime"

    # Embed Bodies
    ADDED_TO_QUEUE = "✅ Added to queue: **[{title}]({uri})**"
    QUEUE_NOW_PLAYING_LINE = "**▶️ Now Playing:** [{title}]({uri}) - `{duration}`\n\n**Up Next:**"
    QUEUE_EMPTY_DESCRIPTION = "**Queue is empty!** Add some tracks with the play command."
    QUEUE_NO_TRACKS = "No tracks in queue."
    QUEUE_LINE = "`{index:02d}` \U0001f3b6 [{title}]({uri}) - `{duration}`"
    QUEUE_FOOTER = "Total Tracks in Queue: {count}"
    QUEUE_FOOTER_DURATION = " • Est. Queue Duration: {duration}"
    QUEUE_FOOTER_STREAMS = " ({streams} streams)"
    QUEUE_FOOTER_PAGE = " • Page {page}/{pages}"
    STATUS_PLAYING = "▶️ Playing"
    STATUS_PAUSED = "⏸️ Paused"
    STATUS_LOOP_QUEUE = "\U0001f501 Queue"
    STATUS_LOOP_DISABLED = "\U0001f501 Disabled"
    STATUS_CURRENT = "**Currently Playing:**\n**[{title}]({uri})**\n⏱️ Duration: `{position}` / `{duration}`"
    STATUS_NOTHING = "No track is currently playing."
    PLAYLIST_FOOTER = "The playlist will start playing soon"
    HELP_LINE = "\U0001f3b5 `{prefix}{usage}` - {description}"
    HELP_FOOTER = "Prefix: {prefix} • Example: {prefix}play <song name>"
    UPDATES_DESCRIPTION = "Here are the latest changes and improvements to the bot:"
    UPDATES_FOOTER = "Bot Updates"
    UPDATES_FIELD = "Version {version} ({date})"
    REQUESTED_BY = "Requested by {requester}"
    POSITION_NOW = "Now"

    # Log Channel Embeds
    LOG_FOOTER = "Bot Log"
    LOG_BOT_STARTED = "✅ Bot Started"
    LOG_BOT_STARTED_BODY = "Logged in as **{user}** (`{user_id}`)\nCurrently in **{guilds}** servers."
    LOG_COMMAND_USED = "ℹ️ Command Used"
    LOG_COMMAND_USED_BODY = (
        "**Command:** `{prefix}{command}`\n**User:** {user} (`{user_id}`)\n"
        "**Channel:** {channel} (`{channel_id}`)\n**Server:** {guild} (`{guild_id}`)"
    )
    LOG_GUILD_JOIN = "✅ Joined Server"
    LOG_GUILD_JOIN_BODY = (
        "**Server Name:** {name}\n**Server ID:** `{guild_id}`\n**Members:** {members}\n**Owner:** {owner}"
    )
    LOG_GUILD_LEAVE = "❌ Left Server"
    LOG_GUILD_LEAVE_BODY = "**Server Name:** {name}\n**Server ID:** `{guild_id}`\n**Members:** {members}"
    LOG_PLAYER_EVENT = "\U0001f3b5 Music Player Event"
    LOG_PLAYER_EVENT_BODY = "Player Event: **{event}**\n**Guild:** {guild_id}"
    LOG_PLAYER_EVENT_TRACK = "\n**Track:** [{title}]({uri})"
    LOG_NODE_STATUS = "ℹ️ Node Status"
    LOG_NODE_STATUS_BODY = "Node **{node}** is now **{status}**"
    LOG_ACTIVITY_CHANGED = "ℹ️ Activity Changed"
    LOG_ACTIVITY_CHANGED_BODY = "**User:** {user} (`{user_id}`)\n**New Activity:** {activity}"
    LOG_ERROR = "❌ Error Occurred"
    LOG_ERROR_BODY = "**Source:** {source}\n**Message:** {message}\n```{trace}```"

    # Player events
    EVENT_TRACK_STARTED = "Track Started"
    EVENT_QUEUE_ENDED = "Queue Ended"
    EVENT_SESSION_STOPPED = "Stopped"
    EVENT_VOICE_LEFT = "Left Voice Channel"


class EmojiConstants:
    """Emoji constants for consistent visual feedback."""

    INFO = "ℹ️"

    PLAY_PAUSE = "⏯️"
    STOP = "⏹️"
    SKIP = "⏭️"

    LOOP = "\U0001f501"
    QUEUE = "\U0001f4dc"

    SPEAKER = "\U0001f50a"
    TIMER = "⏱️"
    USER = "\U0001f464"

    LATENCY_GOOD = "\U0001f7e2"
    LATENCY_WARN = "\U0001f7e0"
    LATENCY_BAD = "\U0001f534"
