"""
Browse Catalog Module

Maps browse queries and play contexts onto ordered song/item lists.

Browsing and play-from-context share one resolution path, so a playlist
browsed on the watch and the queue built when one of its songs is tapped
always come out in the same order.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional

from app.protocols import IMusicCatalog, IPlaylistStore
from core.errors import InvalidArgumentError, NotFoundError, WearProtocolError
from models.song import Song
from models.wear_messages import BrowseType, ContextType, LibraryItem, LibraryItemType

logger = logging.getLogger(__name__)


ROOT_ITEMS = (
    LibraryItem("favorites", "Favorites", "", LibraryItemType.CATEGORY),
    LibraryItem("playlists", "Playlists", "", LibraryItemType.CATEGORY),
    LibraryItem("albums", "Albums", "", LibraryItemType.CATEGORY),
    LibraryItem("artists", "Artists", "", LibraryItemType.CATEGORY),
    LibraryItem("all_songs", "All Songs", "", LibraryItemType.CATEGORY),
)

# Song-list browse types and the play context they correspond to
_CONTEXT_FOR_BROWSE = {
    BrowseType.FAVORITES: ContextType.FAVORITES,
    BrowseType.ALL_SONGS: ContextType.ALL_SONGS,
    BrowseType.ALBUM_SONGS: ContextType.ALBUM,
    BrowseType.ARTIST_SONGS: ContextType.ARTIST,
    BrowseType.PLAYLIST_SONGS: ContextType.PLAYLIST,
}


def project_in_order(song_ids: Iterable[str], songs: Iterable[Song]) -> List[Song]:
    """
    Order songs by an authoritative id list

    Ids that no longer resolve to a song are dropped; repeated ids repeat.
    """
    songs_by_id: Dict[str, Song] = {song.id: song for song in songs}
    return [songs_by_id[song_id] for song_id in song_ids if song_id in songs_by_id]


def song_to_item(song: Song) -> LibraryItem:
    return LibraryItem(
        id=song.id,
        title=song.title,
        subtitle=song.display_artist,
        type=LibraryItemType.SONG,
    )


class BrowseCatalogAdapter:
    """
    Browse Catalog Adapter

    Usage example:
        adapter = BrowseCatalogAdapter(catalog, playlists)

        # Browse
        items = adapter.resolve(BrowseType.PLAYLIST_SONGS, "p1")

        # Play context (lenient, never raises for a bad context)
        songs = adapter.songs_for_context(ContextType.PLAYLIST, "p1")
    """

    def __init__(
        self,
        catalog: IMusicCatalog,
        playlist_store: IPlaylistStore,
        max_songs: int = 500,
        max_albums: int = 200,
        max_artists: int = 200,
    ):
        self._catalog = catalog
        self._playlists = playlist_store
        self._max_songs = max_songs
        self._max_albums = max_albums
        self._max_artists = max_artists

    # ===== Browsing =====

    def resolve(self, browse_type: BrowseType, context_id: Optional[str] = None) -> List[LibraryItem]:
        """
        Resolve a browse query to an ordered list of items

        Raises:
            InvalidArgumentError: browse type needs a context id that is absent or malformed
            NotFoundError: the context id does not resolve
        """
        if browse_type == BrowseType.ROOT:
            return list(ROOT_ITEMS)

        if browse_type == BrowseType.ALBUMS:
            return [
                LibraryItem(
                    id=str(album.id),
                    title=album.title,
                    subtitle=f"{album.artist} · {album.song_count} songs",
                    type=LibraryItemType.ALBUM,
                )
                for album in self._catalog.get_all_albums()[:self._max_albums]
            ]

        if browse_type == BrowseType.ARTISTS:
            return [
                LibraryItem(
                    id=str(artist.id),
                    title=artist.name,
                    subtitle=f"{artist.song_count} songs",
                    type=LibraryItemType.ARTIST,
                )
                for artist in self._catalog.get_all_artists()[:self._max_artists]
            ]

        if browse_type == BrowseType.PLAYLISTS:
            return [
                LibraryItem(
                    id=playlist.id,
                    title=playlist.name,
                    subtitle=f"{playlist.song_count} songs",
                    type=LibraryItemType.PLAYLIST,
                )
                for playlist in self._playlists.get_user_playlists()
            ]

        context_type = _CONTEXT_FOR_BROWSE[browse_type]
        # Browsing favorites is capped like all songs; playing them is not
        limit = self._max_songs if browse_type == BrowseType.FAVORITES else None
        songs = self._resolve_songs(context_type, context_id, limit)
        return [song_to_item(song) for song in songs]

    # ===== Play contexts =====

    def songs_for_context(self, context_type: ContextType, context_id: Optional[str] = None) -> List[Song]:
        """
        Resolve the ordered song list for a play context

        Invalid or unknown contexts are logged and yield an empty list.
        """
        try:
            return self._resolve_songs(context_type, context_id)
        except WearProtocolError as e:
            logger.warning("Cannot resolve play context %s/%s: %s", context_type.value, context_id, e)
            return []

    def _resolve_songs(
        self,
        context_type: ContextType,
        context_id: Optional[str],
        limit: Optional[int] = None,
    ) -> List[Song]:
        if context_type == ContextType.ALBUM:
            return self._catalog.get_songs_for_album(self._numeric_id(context_id, "albumId"))

        if context_type == ContextType.ARTIST:
            return self._catalog.get_songs_for_artist(self._numeric_id(context_id, "artistId"))

        if context_type == ContextType.PLAYLIST:
            return self._playlist_songs(context_id)

        if context_type == ContextType.FAVORITES:
            songs = self._catalog.get_favorite_songs()
            return songs[:limit] if limit is not None else songs

        if context_type == ContextType.ALL_SONGS:
            return self._catalog.get_all_songs()[:self._max_songs]

        raise InvalidArgumentError(f"Unsupported context type: {context_type}")

    def _playlist_songs(self, playlist_id: Optional[str]) -> List[Song]:
        if not playlist_id:
            raise InvalidArgumentError("Missing playlistId for PLAYLIST_SONGS")

        playlist = next(
            (p for p in self._playlists.get_user_playlists() if p.id == playlist_id),
            None,
        )
        if playlist is None:
            raise NotFoundError(f"Playlist not found: {playlist_id}")

        # The bulk fetch does not preserve order; re-project over the stored ids
        songs = self._catalog.get_songs_by_ids(playlist.song_ids)
        return project_in_order(playlist.song_ids, songs)

    @staticmethod
    def _numeric_id(context_id: Optional[str], name: str) -> int:
        if context_id is None:
            raise InvalidArgumentError(f"Missing {name}")
        try:
            return int(context_id)
        except ValueError:
            raise InvalidArgumentError(f"Invalid {name}: {context_id}") from None
