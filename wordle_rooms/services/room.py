"""
Room

A multiplayer room: its players, one game session per player per round, and
the WAITING -> PLAYING -> FINISHED round state machine.

Room methods are not thread-safe on their own. Every caller holds
``room.lock`` for the whole operation (see ``RoomRegistry.room_session``), so
no two transitions on the same room interleave.
"""

import random
import threading
import time
from typing import Dict, List, Optional, Sequence, Tuple

from ..config.game_settings import (
    DEFAULT_MAX_PLAYERS, MAX_ROUNDS, MIN_PLAYERS_TO_START, ROUNDS_PER_GAME, WORD_LIST, points_for_win
)
from ..errors import IdentityError, StateError
from ..models.game import AnswerMode, GuessRecord, GuessResult, SessionStatus
from ..models.room import Player, PlayerStatus, RoomState, RoundOutcome
from ..utils.game_logger import game_logger
from ..utils.helpers import isoformat_timestamp
from .advance_policy import AdvancePolicy, AutoAdvancePolicy, round_finished
from .player_registry import PlayerRegistry
from .session import GameSession, RoundSecret


class Room:

    def __init__(self,
                 room_id: str,
                 max_players: int = DEFAULT_MAX_PLAYERS,
                 answer_mode: AnswerMode = AnswerMode.FIXED,
                 word_list: Optional[Sequence[str]] = None,
                 advance_policy: Optional[AdvancePolicy] = None,
                 max_rounds: int = MAX_ROUNDS,
                 rounds_per_game: int = ROUNDS_PER_GAME,
                 rng: Optional[random.Random] = None,
                 now: Optional[float] = None):
        self.room_id = room_id
        self.max_players = max_players
        self.answer_mode = answer_mode
        self.word_list = list(word_list or WORD_LIST)
        self.advance_policy = advance_policy or AutoAdvancePolicy()
        self.max_rounds = max_rounds
        self.rounds_per_game = rounds_per_game
        self.rng = rng or random.Random()

        self.lock = threading.RLock()
        self.closed = False  # Set once the registry has dropped the room

        self.state = RoomState.WAITING
        self.current_round = 0
        self.players = PlayerRegistry()
        self.sessions: Dict[str, GameSession] = {}  # player_id -> session for the current round
        self.round_secret: Optional[RoundSecret] = None
        self.round_outcomes: Dict[str, RoundOutcome] = {}
        self.round_history: List[Dict] = []
        self.rankings: Optional[List[Dict]] = None

        self.created_at = now if now is not None else time.time()
        self.last_activity = self.created_at

    def touch(self, now: Optional[float] = None) -> None:
        self.last_activity = now if now is not None else time.time()

    @property
    def is_empty(self) -> bool:
        return len(self.players) == 0

    @property
    def round_finished(self) -> bool:
        return self.state == RoomState.PLAYING and round_finished(self.players)

    # Membership

    def add_player(self, connection_id: str, name: str, now: Optional[float] = None) -> Player:
        """
        Add a new player to a waiting room.

        Raises:
            StateError: the game has started or the room is full
        """
        if self.state != RoomState.WAITING:
            raise StateError("Game already in progress")
        if len(self.players) >= self.max_players:
            raise StateError("Room is full")

        player = self.players.add(connection_id, name, now)
        self.touch(now)
        game_logger.log_room_event(self.room_id, 'player_joined', player_id=player.player_id,
                                   player_name=name, is_host=player.is_host)
        return player

    def disconnect(self, connection_id: str, now: Optional[float] = None) -> Optional[Player]:
        """
        Suspend the player behind ``connection_id``.

        The player keeps their seat, score and session until they reconnect or
        are swept.
        """
        player = self.players.disconnect(connection_id, now)
        if player is None:
            return None

        game_logger.log_room_event(self.room_id, 'player_disconnected', player_id=player.player_id,
                                   player_name=player.name)
        self._after_departure()
        self.touch(now)
        return player

    def reconnect(self, name: str, connection_id: str, now: Optional[float] = None) -> Player:
        """
        Rebind a disconnected player, found by display name, to a new connection.

        Raises:
            IdentityError: the name is unknown, ambiguous or still connected
        """
        player = self.players.find_for_reconnect(name)
        self.players.rebind(player, connection_id, now)

        if self.state == RoomState.WAITING:
            player.status = PlayerStatus.READY
        elif self.state == RoomState.PLAYING:
            session = self.sessions.get(player.player_id)
            if session is None:
                session = self.round_secret.new_session()
                self.sessions[player.player_id] = session
                player.guesses = []
            player.status = PlayerStatus.FINISHED if session.is_over else PlayerStatus.PLAYING
        else:
            player.status = PlayerStatus.FINISHED

        promoted = self.players.ensure_host()
        if promoted is not None:
            self._log_host_change(promoted)
        self.touch(now)
        game_logger.log_room_event(self.room_id, 'player_reconnected', player_id=player.player_id,
                                   player_name=name, status=player.status.value)
        return player

    def remove_player(self, player_id: str, now: Optional[float] = None) -> Player:
        """
        Permanently remove a player (explicit leave).

        Raises:
            IdentityError: no such player
        """
        player = self.players.remove(player_id)
        self.sessions.pop(player_id, None)

        game_logger.log_room_event(self.room_id, 'player_left', player_id=player_id,
                                   player_name=player.name, players_remaining=len(self.players))
        self._after_departure()
        self.touch(now)
        return player

    def sweep_players(self, grace_seconds: float, now: Optional[float] = None) -> List[Player]:
        """Remove players who stayed disconnected longer than ``grace_seconds``."""
        removed = []
        for player in self.players.idle_disconnected(grace_seconds, now):
            self.players.remove(player.player_id)
            self.sessions.pop(player.player_id, None)
            removed.append(player)
            game_logger.log_room_event(self.room_id, 'player_swept', player_id=player.player_id,
                                       player_name=player.name)

        if removed:
            self._after_departure()
        return removed

    def _after_departure(self) -> None:
        promoted = self.players.ensure_host()
        if promoted is not None:
            self._log_host_change(promoted)
        self._maybe_advance()

    def _log_host_change(self, host: Player) -> None:
        game_logger.log_room_event(self.room_id, 'host_migrated', player_id=host.player_id,
                                   player_name=host.name)

    # Rounds

    def start_game(self, player_id: str, now: Optional[float] = None) -> None:
        """
        Start round 1.

        Raises:
            StateError: the game already started or fewer than two players are connected
            IdentityError: the caller is not the host
        """
        if self.state != RoomState.WAITING:
            raise StateError("Game already in progress")

        player = self.players.require(player_id)
        if not player.is_host:
            raise IdentityError("Only the host can start the game")

        if len(self.players.connected()) < MIN_PLAYERS_TO_START:
            raise StateError(f"Need at least {MIN_PLAYERS_TO_START} players to start")

        for member in self.players:
            member.score = 0
        self.current_round = 1
        self._begin_round()
        self.touch(now)

    def make_guess(self, player_id: str, raw_guess, now: Optional[float] = None) -> GuessResult:
        """
        Score a guess for one player and react if it ends their round.

        Raises:
            StateError: the room is not playing or the player is not in the round
            ValidationError: the guess is malformed
        """
        if self.state != RoomState.PLAYING:
            raise StateError("Game not in progress")

        player = self.players.require(player_id)
        if player.status == PlayerStatus.FINISHED:
            raise StateError("You have already finished this round")
        session = self.sessions.get(player_id)
        if player.status != PlayerStatus.PLAYING or session is None:
            raise StateError("Player not active")

        result = session.make_guess(raw_guess)
        player.guesses.append(GuessRecord(result.guesses[-1].guess, result.feedback, self.current_round))
        self.touch(now)

        if result.is_over:
            self._finish_player(player, result)
            self._maybe_advance()

        return result

    def mark_ready(self, player_id: str, now: Optional[float] = None) -> None:
        """
        Flag a finished player as ready for the next round.

        Raises:
            StateError: the room is not playing or the player has not finished
        """
        if self.state != RoomState.PLAYING:
            raise StateError("Game not in progress")

        player = self.players.require(player_id)
        if player.status != PlayerStatus.FINISHED:
            raise StateError("Player must finish current round first")

        player.ready_for_next_round = True
        self.touch(now)
        game_logger.log_room_event(self.room_id, 'player_ready', player_id=player_id,
                                   round=self.current_round)
        self._maybe_advance()

    def _finish_player(self, player: Player, result: GuessResult) -> None:
        points = points_for_win(len(result.guesses)) if result.status == SessionStatus.WIN else 0
        player.score += points
        player.status = PlayerStatus.FINISHED
        self.round_outcomes[player.player_id] = RoundOutcome(
            player_id=player.player_id,
            name=player.name,
            status=result.status.value,
            guesses_used=len(result.guesses),
            points=points,
            answer=result.answer
        )
        game_logger.log_room_event(self.room_id, 'player_finished_round', player_id=player.player_id,
                                   round=self.current_round, status=result.status.value,
                                   guesses_used=len(result.guesses), points=points, score=player.score)

    def _maybe_advance(self) -> bool:
        if self.state != RoomState.PLAYING:
            return False
        if not self.advance_policy.should_advance(self.players):
            return False
        self._end_round()
        return True

    def _begin_round(self) -> None:
        self.round_secret = RoundSecret.draw(self.answer_mode, self.word_list, self.max_rounds, self.rng)
        self.sessions.clear()
        self.round_outcomes.clear()

        for player in self.players:
            player.guesses = []
            player.ready_for_next_round = False
            if player.is_connected:
                player.status = PlayerStatus.PLAYING
                self.sessions[player.player_id] = self.round_secret.new_session()

        self.state = RoomState.PLAYING
        game_logger.log_room_event(self.room_id, 'round_started', round=self.current_round,
                                   players=len(self.sessions), game_mode=self.answer_mode.value)

    def _end_round(self) -> None:
        entry = {
            'round': self.current_round,
            'outcomes': [outcome.to_dict() for outcome in self.round_outcomes.values()]
        }
        # Adversarial rounds have no shared answer; each outcome carries its own
        if self.round_secret is not None and self.round_secret.answer is not None:
            entry['answer'] = self.round_secret.answer
        self.round_history.append(entry)
        game_logger.log_room_event(self.room_id, 'round_ended', round=self.current_round)

        if self.current_round >= self.rounds_per_game:
            self._finish_game()
        else:
            self.current_round += 1
            self._begin_round()

    def _finish_game(self) -> None:
        self.state = RoomState.FINISHED
        self.rankings = self.calculate_rankings()
        game_logger.log_room_event(self.room_id, 'game_finished', rounds=self.current_round,
                                   rankings=self.rankings)

    def calculate_rankings(self) -> List[Dict]:
        """Players sorted by cumulative score, highest first."""
        ranked = sorted(self.players, key=lambda player: player.score, reverse=True)
        return [
            {'rank': index + 1, 'player_id': player.player_id, 'name': player.name, 'score': player.score}
            for index, player in enumerate(ranked)
        ]

    # Views

    def is_expired(self, inactive_seconds: float, finished_seconds: float, now: Optional[float] = None) -> bool:
        now = now if now is not None else time.time()
        limit = finished_seconds if self.state == RoomState.FINISHED else inactive_seconds
        return now - self.last_activity > limit

    def _player_view(self, player: Player, viewer_id: Optional[str]) -> Dict:
        session = self.sessions.get(player.player_id)
        own = player.player_id == viewer_id
        view = {
            'player_id': player.player_id,
            'name': player.name,
            'score': player.score,
            'status': player.status.value,
            'is_host': player.is_host,
            'ready_for_next_round': player.ready_for_next_round,
            'guesses_used': len(player.guesses),
            'rounds_left': session.rounds_left if session else self.max_rounds,
            'game_status': session.status.value if session else SessionStatus.IN_PROGRESS.value,
            'joined_at': isoformat_timestamp(player.joined_at)
        }
        if own:
            view['guesses'] = [record.to_dict() for record in player.guesses]
            if session is not None:
                view['answer'] = session.answer
                if session.mode is AnswerMode.ADVERSARIAL:
                    view['candidates_count'] = session.answer_source.candidates_count
        else:
            # Other players' letters stay private; only their feedback is shared
            view['guesses'] = [{'feedback': record.to_dict()['feedback']} for record in player.guesses]
        return view

    def snapshot(self, viewer_id: Optional[str] = None) -> Dict:
        """Full room state as seen by ``viewer_id`` (public fields only when None)."""
        return {
            'room_id': self.room_id,
            'game_mode': self.answer_mode.value,
            'state': self.state.value,
            'max_players': self.max_players,
            'current_round': self.current_round,
            'rounds_per_game': self.rounds_per_game,
            'max_rounds': self.max_rounds,
            'advance_policy': self.advance_policy.name,
            'round_finished': self.round_finished,
            'you': viewer_id,
            'players': [self._player_view(player, viewer_id) for player in self.players],
            'round_history': list(self.round_history),
            'rankings': self.rankings,
            'created_at': isoformat_timestamp(self.created_at),
            'last_activity': isoformat_timestamp(self.last_activity)
        }

    def member_snapshots(self) -> List[Tuple[str, Dict]]:
        """(connection_id, personalised snapshot) for every connected member."""
        return [
            (player.connection_id, self.snapshot(player.player_id))
            for player in self.players
            if player.connection_id is not None
        ]

    def summary(self) -> Dict:
        """Public lobby listing for this room."""
        return {
            'room_id': self.room_id,
            'game_mode': self.answer_mode.value,
            'state': self.state.value,
            'player_count': len(self.players),
            'max_players': self.max_players,
            'created_at': isoformat_timestamp(self.created_at),
            'last_activity': isoformat_timestamp(self.last_activity)
        }

    def status_summary(self) -> Dict:
        total = len(self.players)
        active = len(self.players.connected())
        return {
            'total_players': total,
            'active_players': active,
            'disconnected_players': total - active,
            'state': self.state.value,
            'current_round': self.current_round,
            'last_activity': isoformat_timestamp(self.last_activity)
        }
