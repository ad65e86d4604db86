"""Table of MPD commands and the reply shape each one expects."""

from __future__ import annotations

from typing import NamedTuple

from .protocol.messages import (
    BINARY,
    DATABASE,
    GROUPS,
    ITEM,
    LIST,
    MESSAGES,
    MOUNTS,
    NEIGHBORS,
    NOTHING,
    OBJECT,
    OUTPUTS,
    PARTITIONS,
    PLAYLISTS,
    PLUGINS,
    SONGS,
    ResponseShape,
    objects,
)


class Command(NamedTuple):
    name: str
    wire: str
    shape: ResponseShape
    doc: str = ""


def _command(name: str, shape: ResponseShape, doc: str = "", wire: str | None = None) -> Command:
    return Command(name, wire or name, shape, doc)


_TABLE = [
    # Querying status
    _command("clearerror", NOTHING, "Clears the current error message in status."),
    _command("currentsong", OBJECT, "Song info of the current song."),
    _command("idle", LIST, "Waits until something changes; returns changed subsystems."),
    _command("status", OBJECT, "Current player status and volume level."),
    _command("stats", OBJECT, "Database and daemon statistics."),
    # Playback options
    _command("consume", NOTHING, "Sets consume state (bool or 'oneshot')."),
    _command("crossfade", NOTHING, "Sets crossfading between songs, in seconds."),
    _command("mixrampdb", NOTHING, "Sets the MixRamp threshold in dB."),
    _command("mixrampdelay", NOTHING, "Additional MixRamp time subtracted from the overlap."),
    _command("random", NOTHING, "Sets random state."),
    _command("repeat", NOTHING, "Sets repeat state."),
    _command("setvol", NOTHING, "Sets volume to 0-100."),
    _command("getvol", ITEM, "Reads the volume."),
    _command("single", NOTHING, "Sets single state (bool or 'oneshot')."),
    _command("replay_gain_mode", NOTHING, "Sets the replay gain mode."),
    _command("replay_gain_status", ITEM, "Prints the replay gain mode."),
    _command("volume", NOTHING, "Changes volume by the given amount."),
    # Controlling playback
    _command("next", NOTHING, "Plays next song in the queue."),
    _command("pause", NOTHING, "Pauses (1), resumes (0) or toggles (no argument)."),
    _command("play", NOTHING, "Begins playing the queue at position songpos."),
    _command("playid", NOTHING, "Begins playing the queue at song id."),
    _command("previous", NOTHING, "Plays previous song in the queue."),
    _command("seek", NOTHING, "Seeks to time (seconds) of entry songpos."),
    _command("seekid", NOTHING, "Seeks to time (seconds) of song id."),
    _command("seekcur", NOTHING, "Seeks within the current song; '+' or '-' for relative."),
    _command("stop", NOTHING, "Stops playing."),
    # The queue
    _command("add", NOTHING, "Adds a file or directory (recursively) to the queue."),
    _command("addid", ITEM, "Adds a song and returns its id."),
    _command("clear", NOTHING, "Clears the queue."),
    _command("delete", NOTHING, "Deletes a position or range from the queue."),
    _command("deleteid", NOTHING, "Deletes the song id from the queue."),
    _command("move", NOTHING, "Moves a position or range to another position."),
    _command("moveid", NOTHING, "Moves the song id to another position."),
    _command("playlistfind", SONGS, "Finds songs in the queue with strict matching."),
    _command("playlistid", SONGS, "Songs in the queue, or the given song id."),
    _command("playlistinfo", SONGS, "Songs in the queue, or the given position or range."),
    _command("playlistsearch", SONGS, "Case-insensitive search in the queue."),
    _command("plchanges", SONGS, "Changed songs since a queue version."),
    _command("plchangesposid", objects("cpos"), "Changed positions and ids since a queue version."),
    _command("prio", NOTHING, "Sets the priority of positions or ranges."),
    _command("prioid", NOTHING, "Sets the priority of song ids."),
    _command("rangeid", NOTHING, "Plays only a portion of the song id."),
    _command("shuffle", NOTHING, "Shuffles the queue, or a range of it."),
    _command("swap", NOTHING, "Swaps two queue positions."),
    _command("swapid", NOTHING, "Swaps two song ids."),
    _command("addtagid", NOTHING, "Adds a tag to the song id."),
    _command("cleartagid", NOTHING, "Removes tags from the song id."),
    # Stored playlists
    _command("listplaylist", LIST, "Song files in a stored playlist."),
    _command("listplaylistinfo", SONGS, "Songs with metadata in a stored playlist."),
    _command("listplaylists", PLAYLISTS, "Stored playlists with modification times."),
    _command("load", NOTHING, "Loads a stored playlist into the queue."),
    _command("playlistadd", NOTHING, "Adds a uri to a stored playlist."),
    _command("playlistclear", NOTHING, "Clears a stored playlist."),
    _command("playlistdelete", NOTHING, "Deletes a position from a stored playlist."),
    _command("playlistmove", NOTHING, "Moves a song within a stored playlist."),
    _command("rename", NOTHING, "Renames a stored playlist."),
    _command("rm", NOTHING, "Removes a stored playlist."),
    _command("save", NOTHING, "Saves the queue as a stored playlist."),
    _command("searchplaylist", SONGS, "Searches a stored playlist with a filter."),
    # The music database
    _command("albumart", BINARY, "Cover art from the song's directory."),
    _command("count", GROUPS, "Counts songs and playtime matching a filter."),
    _command("getfingerprint", ITEM, "Chromaprint fingerprint of a song."),
    _command("find", SONGS, "Finds songs in the database matching a filter."),
    _command("findadd", NOTHING, "Finds songs and adds them to the queue."),
    _command("list", LIST, "Unique values of a tag."),
    _command("list_groups", GROUPS, "Unique values of a tag with group clauses.", wire="list"),
    _command("listall", DATABASE, "All songs and directories below a uri."),
    _command("listallinfo", DATABASE, "Like listall, with metadata."),
    _command("listfiles", DATABASE, "Directory contents including unrecognized files."),
    _command("lsinfo", DATABASE, "Contents of a directory."),
    _command("readcomments", OBJECT, "Raw comments of a song file."),
    _command("readpicture", BINARY, "Picture embedded in a song file."),
    _command("search", SONGS, "Case-insensitive database search."),
    _command("searchadd", NOTHING, "Searches and adds the result to the queue."),
    _command("searchaddpl", NOTHING, "Searches and adds the result to a stored playlist."),
    _command("searchcount", GROUPS, "Case-insensitive count."),
    _command("update", ITEM, "Updates the database; returns the job id."),
    _command("rescan", ITEM, "Like update, also rescanning unmodified files."),
    # Mounts and neighbors
    _command("mount", NOTHING, "Mounts a storage uri at a path."),
    _command("unmount", NOTHING, "Unmounts a path."),
    _command("listmounts", MOUNTS, "Known mounts."),
    _command("listneighbors", NEIGHBORS, "Neighbors found by the neighbor plugins."),
    # Stickers
    _command("sticker_get", ITEM, "Reads a sticker value.", wire="sticker get"),
    _command("sticker_set", NOTHING, "Sets a sticker value.", wire="sticker set"),
    _command("sticker_inc", NOTHING, "Increments a numeric sticker.", wire="sticker inc"),
    _command("sticker_dec", NOTHING, "Decrements a numeric sticker.", wire="sticker dec"),
    _command("sticker_delete", NOTHING, "Deletes one or all stickers.", wire="sticker delete"),
    _command("sticker_list", LIST, "Stickers of an object.", wire="sticker list"),
    _command("sticker_find", SONGS, "Objects below a uri carrying a sticker.", wire="sticker find"),
    _command("stickernames", LIST, "Sticker names in use."),
    _command("stickertypes", LIST, "Sticker types supported."),
    _command("stickernamestypes", GROUPS, "Sticker names with their types."),
    # Connection settings
    _command("password", NOTHING, "Authenticates with a password."),
    _command("ping", NOTHING, "Does nothing but return OK."),
    _command("binarylimit", NOTHING, "Sets the maximum binary chunk size."),
    _command("tagtypes", LIST, "Tag types enabled for this client."),
    _command("tagtypes_disable", NOTHING, "Removes tag types from responses.", wire="tagtypes disable"),
    _command("tagtypes_enable", NOTHING, "Re-enables tag types.", wire="tagtypes enable"),
    _command("tagtypes_clear", NOTHING, "Disables all tag types.", wire="tagtypes clear"),
    _command("tagtypes_all", NOTHING, "Enables all tag types.", wire="tagtypes all"),
    # Partitions
    _command("partition", NOTHING, "Switches the client to another partition."),
    _command("listpartitions", PARTITIONS, "Partitions of the server."),
    _command("newpartition", NOTHING, "Creates a partition."),
    _command("delpartition", NOTHING, "Deletes a partition."),
    _command("moveoutput", NOTHING, "Moves an output to the current partition."),
    # Audio outputs
    _command("disableoutput", NOTHING, "Turns an output off."),
    _command("enableoutput", NOTHING, "Turns an output on."),
    _command("toggleoutput", NOTHING, "Toggles an output."),
    _command("outputs", OUTPUTS, "Information about all outputs."),
    _command("outputset", NOTHING, "Sets a runtime attribute of an output."),
    # Reflection
    _command("config", OBJECT, "Configuration values (local clients only)."),
    _command("commands", LIST, "Commands the current user may run."),
    _command("notcommands", LIST, "Commands the current user may not run."),
    _command("urlhandlers", LIST, "Supported URL schemes."),
    _command("decoders", PLUGINS, "Decoder plugins with suffixes and MIME types."),
    # Client to client
    _command("subscribe", NOTHING, "Subscribes to a channel."),
    _command("unsubscribe", NOTHING, "Unsubscribes from a channel."),
    _command("channels", LIST, "Channels with at least one subscriber."),
    _command("readmessages", MESSAGES, "Reads pending messages for this client."),
    _command("sendmessage", NOTHING, "Sends a message to a channel."),
]

COMMANDS: dict[str, Command] = {command.name: command for command in _TABLE}


def lookup(name: str) -> Command:
    try:
        return COMMANDS[name]
    except KeyError:
        raise KeyError(f"Unknown command: {name}") from None
