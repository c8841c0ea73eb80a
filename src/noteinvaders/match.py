"""Match orchestration: waves, firing, shield damage, scoring and end conditions.

``Match`` owns a simulation clock advanced by ``tick(dt)``. Note input is
handed in with ``handle_note_on`` / ``handle_note_off`` (or drained from the
input source with ``process_input``); every shot resolves later, from inside
``tick``, through the fire scheduler.
"""

from __future__ import annotations

import logging
import math
import random

from noteinvaders.charge import ChargeFireController, ChargeShot
from noteinvaders.config import (
    DEFAULT_DEVICE_MAX,
    DEFAULT_DEVICE_MIN,
    WINDOW_HEIGHT,
    WINDOW_WIDTH,
    GameTuning,
)
from noteinvaders.models import (
    DefeatReason,
    GameMode,
    GameState,
    HighScore,
    LiveNoteEvent,
    MatchResult,
    MatchSnapshot,
    NoteMode,
    PitchRange,
)
from noteinvaders.player import PlayerRig
from noteinvaders.ports import AudioFeedback, InputSource, ScoreStore
from noteinvaders.projectile import Projectile
from noteinvaders.scheduler import FireScheduler
from noteinvaders.scoring import game_over_result, kill_points, score_key, victory_result
from noteinvaders.target import Target
from noteinvaders.waves import (
    centered_range,
    generate_targets,
    palette_for_wave,
    pitch_range_for_wave,
    pitch_to_x,
)

logger = logging.getLogger(__name__)

SINGLE_TAG = "single"
CHARGE_TAG = "charge"


class Match:
    def __init__(
        self,
        input_source: InputSource | None = None,
        audio: AudioFeedback | None = None,
        scores: ScoreStore | None = None,
        tuning: GameTuning | None = None,
        rng: random.Random | None = None,
        game_mode: GameMode = GameMode.CLASSIC,
        note_mode: NoteMode = NoteMode.SINGLE,
        field_width: float = WINDOW_WIDTH,
        field_height: float = WINDOW_HEIGHT,
    ) -> None:
        self.input_source = input_source
        self.audio = audio
        self.scores = scores
        self.tuning = tuning or GameTuning()
        self.rng = rng or random.Random()
        self.game_mode = game_mode
        self.note_mode = note_mode
        self.field_width = field_width
        self.field_height = field_height

        self.state = GameState.TITLE
        self.clock = 0.0
        self.focused = True
        self.scheduler = FireScheduler()
        self.charge = self._new_charge()

        self.rig: PlayerRig | None = None
        self.targets: list[Target] = []
        self.projectiles: list[Projectile] = []
        self.wave = 1
        self.health: float = self.tuning.max_health
        self.score = 0
        self.result: MatchResult | None = None
        self.transition_remaining = 0.0

        self.device_range = self._device_range()
        self.pitch_range = centered_range(self.device_range)
        self.palette = palette_for_wave(1)
        self.high_score = self._load_high_score()
        self._last_note_on: dict[int, float] = {}

    # -- Properties ------------------------------------------------------

    @property
    def is_chord_mode(self) -> bool:
        return self.note_mode == NoteMode.CHORD

    @property
    def score_key(self) -> str:
        return score_key(self.game_mode, self.note_mode)

    @property
    def waves_total(self) -> int | None:
        if self.game_mode == GameMode.CLASSIC:
            return self.tuning.waves_total
        return None

    # -- Lifecycle -------------------------------------------------------

    def start_game(
        self,
        game_mode: GameMode | None = None,
        note_mode: NoteMode | None = None,
    ) -> None:
        if game_mode is not None:
            self.game_mode = game_mode
        if note_mode is not None:
            self.note_mode = note_mode

        self.scheduler.cancel()
        self.charge = self._new_charge()
        self._last_note_on.clear()

        self.state = GameState.PLAYING
        self.score = 0
        self.wave = 1
        self.health = self.tuning.max_health
        self.result = None
        self.transition_remaining = 0.0
        self.high_score = self._load_high_score()

        self.device_range = self._device_range()
        self.pitch_range = pitch_range_for_wave(1, self.device_range, self.rng)
        self.palette = palette_for_wave(1)
        self.rig = PlayerRig(self.field_width, self.field_height, self.tuning.max_ammo)
        self.projectiles = []
        self.targets = self._spawn_wave()

        logger.info("Game started: %s", self.score_key)
        if self.audio:
            self.audio.play_game_start()

    def restart(self) -> None:
        self.start_game(self.game_mode, self.note_mode)

    def return_to_title(self) -> None:
        self._leave_playing()
        self.state = GameState.TITLE
        self.rig = None
        self.targets = []
        self.projectiles = []
        self.pitch_range = centered_range(self.device_range)
        self.palette = palette_for_wave(1)
        self.high_score = self._load_high_score()

    def pause(self) -> None:
        if self.state != GameState.PLAYING:
            return
        self._leave_playing()
        self.state = GameState.PAUSED
        logger.info("Paused on wave %d", self.wave)

    def resume(self) -> None:
        """Continue after a pause, charging the pause penalty in one step."""
        if self.state != GameState.PAUSED:
            return
        penalty = self.tuning.pause_penalty
        for target in self.targets:
            if not target.is_dead:
                target.update(penalty)
        for projectile in self.projectiles:
            projectile.update(penalty)
        self.projectiles = [p for p in self.projectiles if p.active]
        if self.rig is not None:
            self.rig.update(penalty)

        self.state = GameState.PLAYING
        logger.info("Resumed with a %.1fs penalty", penalty)
        self._check_shield()

    def end_survival(self) -> None:
        """Stop an endless run, scoring it as a victory."""
        if self.game_mode != GameMode.SURVIVAL:
            return
        if self.state not in (GameState.PLAYING, GameState.PAUSED, GameState.WAVE_TRANSITION):
            return
        self._victory()

    def set_focus(self, focused: bool) -> None:
        self.focused = focused
        if not focused:
            self.charge.cancel(self.clock)
            self.scheduler.cancel(CHARGE_TAG)
            self._last_note_on.clear()
        elif self.state == GameState.PLAYING:
            self._check_shield()

    def resize(self, width: float, height: float) -> None:
        self.field_width = width
        self.field_height = height
        if self.rig is not None:
            self.rig.resize(width, height)

    # -- Input -----------------------------------------------------------

    def process_input(self) -> list[LiveNoteEvent]:
        """Drain the input source and dispatch every queued event."""
        events: list[LiveNoteEvent] = []
        if self.input_source is None:
            return events
        while (event := self.input_source.poll()) is not None:
            events.append(event)
            self.handle_event(event)
        return events

    def handle_event(self, event: LiveNoteEvent) -> None:
        if event.is_note_on:
            self.handle_note_on(event.pitch, event.velocity)
        else:
            self.handle_note_off(event.pitch)

    def handle_note_on(self, pitch: int, velocity: int = 100) -> None:
        if self.state != GameState.PLAYING or self.rig is None:
            return
        if not self._can_fire():
            return

        last = self._last_note_on.get(pitch)
        if last is not None and self.clock - last < self.tuning.note_debounce:
            return
        self._last_note_on[pitch] = self.clock

        if self.is_chord_mode:
            shot = self.charge.note_on(pitch, self.clock, self.targets)
            if shot is not None:
                self._schedule_charge_shot(shot)
        else:
            self._fire_single(pitch)

    def handle_note_off(self, pitch: int) -> None:
        self._last_note_on.pop(pitch, None)
        if self.state != GameState.PLAYING or not self.is_chord_mode:
            return
        shot = self.charge.note_off(pitch, self.clock, can_fire=self._can_fire())
        if shot is not None:
            self._schedule_charge_shot(shot)

    # -- Simulation ------------------------------------------------------

    def tick(self, dt: float) -> None:
        if not self.focused:
            dt = min(dt, self.tuning.unfocused_max_step)
        if self.state == GameState.PLAYING:
            self._tick_playing(dt)
        elif self.state == GameState.WAVE_TRANSITION:
            self._tick_transition(dt)
        elif self.state != GameState.PAUSED:
            self.clock += dt

    def _tick_playing(self, dt: float) -> None:
        rig = self.rig
        if rig is None:
            return
        self.clock += dt
        self.scheduler.run_due(self.clock)

        if self.is_chord_mode:
            shot = self.charge.check_timeout(self.clock, can_fire=self._can_fire())
            if shot is not None:
                self._schedule_charge_shot(shot)

        rig.update(dt)
        for target in self.targets:
            target.update(dt)
        self._check_shield()
        for projectile in self.projectiles:
            projectile.update(dt)
        self.projectiles = [p for p in self.projectiles if p.active]

        self._check_end()

    def _tick_transition(self, dt: float) -> None:
        self.clock += dt
        for target in self.targets:
            target.update(dt)
        for projectile in self.projectiles:
            projectile.update(dt)
        self.projectiles = [p for p in self.projectiles if p.active]

        self.transition_remaining -= dt
        if self.transition_remaining <= 0:
            self._start_next_wave()

    def _check_shield(self) -> None:
        rig = self.rig
        if rig is None:
            return
        for target in self.targets:
            if not target.is_alive or target.has_hit_shield:
                continue
            if not self._touches_shield(target, rig):
                continue
            self.health -= self.tuning.shield_penalty
            target.start_shield_flash()
            target.start_death()
            logger.info("%s hit the shield, health %.0f", target.label, self.health)
            if self.audio and self.focused:
                self.audio.play_shield_hit()

    def _touches_shield(self, target: Target, rig: PlayerRig) -> bool:
        if any(rig.shield_contains(x, y) for x, y in target.boundary_points()):
            return True
        # A lump step can carry a target clean through the band
        overlaps = target.x <= rig.shield_x + rig.shield_width and target.x + target.width >= rig.shield_x
        return overlaps and target.is_below_shield(rig.shield_y)

    def _check_end(self) -> None:
        if self.rig is None:
            return
        if self.targets and not any(t.is_alive for t in self.targets):
            if self.game_mode == GameMode.CLASSIC and self.wave >= self.tuning.waves_total:
                self._victory()
            else:
                self._start_wave_transition()
            return

        if not self.rig.has_ammo() and not self.projectiles and not len(self.scheduler):
            self._game_over(DefeatReason.OUT_OF_AMMO)
            return

        if self.health <= 0:
            self._game_over(DefeatReason.SHIELD_DESTROYED)

    # -- Firing ----------------------------------------------------------

    def _can_fire(self) -> bool:
        """Ammo left beyond what the pending shots will spend."""
        return self.rig is not None and self.rig.ammo > len(self.scheduler)

    def _fire_single(self, pitch: int) -> None:
        if self.rig is None:
            return
        target = next((t for t in self.targets if t.is_alive and t.matches(pitch)), None)
        if target is not None:
            aim = target.center
        else:
            aim = (pitch_to_x(pitch, self.field_width, self.pitch_range), 0.0)
        self.rig.move_to(aim[0])
        logger.debug("Note %d -> %s", pitch, target.label if target else "miss")

        self.scheduler.schedule(
            self.clock + self.tuning.single_fire_delay,
            lambda: self._resolve_single(target, aim),
            tag=SINGLE_TAG,
        )

    def _resolve_single(self, target: Target | None, aim: tuple[float, float]) -> None:
        if self.state != GameState.PLAYING or self.rig is None:
            return
        projectile = Projectile((self.rig.center_x, self.rig.y), aim, power=1)
        if target is not None and target.is_alive:
            self._destroy(target, projectile, power=1)
        elif target is None and self.audio:
            self.audio.play_miss()
        self.projectiles.append(projectile)
        self.rig.consume_ammo()

    def _schedule_charge_shot(self, shot: ChargeShot) -> None:
        if self.rig is None:
            return
        if shot.target is not None:
            aim = shot.target.center
            self.rig.move_to(aim[0])
            delay = self.tuning.charge_fire_delay
        else:
            if shot.aim_pitch is not None:
                x = pitch_to_x(shot.aim_pitch, self.field_width, self.pitch_range)
                self.rig.move_to(x)
            else:
                x = self.rig.center_x
            aim = (x, 0.0)
            delay = self.tuning.release_fire_delay

        self.scheduler.schedule(
            self.clock + delay,
            lambda: self._resolve_charge(shot, aim),
            tag=CHARGE_TAG,
        )

    def _resolve_charge(self, shot: ChargeShot, aim: tuple[float, float]) -> None:
        if self.state != GameState.PLAYING or self.rig is None:
            return
        if shot.target is not None:
            start = (aim[0], self.rig.y)
        else:
            start = (self.rig.center_x, self.rig.y)
        projectile = Projectile(start, aim, power=shot.power)

        if shot.target is not None and shot.target.is_alive:
            self._destroy(shot.target, projectile, power=shot.power)
        elif shot.target is None and self.audio:
            self.audio.play_miss()
        if shot.power >= 3 and self.audio:
            self.audio.play_explosive()

        self.projectiles.append(projectile)
        self.charge.finish(self.clock)
        self._last_note_on.clear()
        self.rig.consume_ammo()

    def _destroy(self, target: Target, projectile: Projectile, power: int) -> None:
        target.start_hit_flash()
        target.start_death()
        projectile.mark_hit()
        self.score += kill_points(power, self.tuning)
        if self.audio:
            self.audio.play_destroyed()
            self.audio.play_hit()

    # -- Waves and endings -----------------------------------------------

    def _spawn_wave(self) -> list[Target]:
        return generate_targets(
            self.wave,
            self.note_mode,
            self.pitch_range,
            self.field_width,
            rng=self.rng,
            base_count=self.tuning.base_target_count,
            hide_uncommon=self.tuning.hide_uncommon_chords,
        )

    def _start_wave_transition(self) -> None:
        self._leave_playing()
        self.wave += 1
        self.state = GameState.WAVE_TRANSITION
        self.transition_remaining = self.tuning.wave_transition_time
        logger.info("Wave cleared, next wave %d", self.wave)
        if self.audio:
            self.audio.play_wave_complete()

    def _start_next_wave(self) -> None:
        previous_count = len(self.targets)
        self.state = GameState.PLAYING
        self.transition_remaining = 0.0
        self.palette = palette_for_wave(self.wave)
        self.pitch_range = pitch_range_for_wave(self.wave, self.device_range, self.rng)
        self.targets = self._spawn_wave()

        if self.game_mode == GameMode.SURVIVAL and self.wave > 1 and self.rig is not None:
            bonus = math.floor(previous_count * self.tuning.survival_ammo_multiplier)
            added = self.rig.refill(bonus)
            logger.debug("Wave %d: refilled %d of %d ammo", self.wave, added, bonus)

    def _victory(self) -> None:
        ammo = self.rig.ammo if self.rig is not None else 0
        self._leave_playing()
        self.state = GameState.VICTORY
        result = victory_result(
            self.score, ammo, self.health, self.wave, self.game_mode, self.tuning
        )
        self.score = result.final_score
        result.is_high_score = self._record_high_score(result.waves_completed)
        self.result = result
        logger.info("Victory: %d points", self.score)
        if self.audio:
            self.audio.play_victory(result.is_high_score)

    def _game_over(self, reason: DefeatReason) -> None:
        self._leave_playing()
        self.state = GameState.GAME_OVER
        result = game_over_result(self.score, self.wave, self.tuning)
        result.reason = reason
        self.score = result.final_score
        result.is_high_score = self._record_high_score(self.wave)
        self.result = result
        logger.info("Game over on wave %d (%s): %d points", self.wave, reason.name, self.score)
        if self.audio:
            self.audio.play_game_over(result.is_high_score)

    def _record_high_score(self, wave: int) -> bool:
        if self.score <= self.high_score.score:
            return False
        self.high_score = HighScore(self.score, wave)
        if self.scores is not None:
            self.scores.save(self.score, self.score_key, wave)
        logger.info("New high score for %s: %d (wave %d)", self.score_key, self.score, wave)
        return True

    def _leave_playing(self) -> None:
        self.scheduler.cancel()
        self.charge.cancel(self.clock)
        self._last_note_on.clear()

    # -- Helpers ---------------------------------------------------------

    def _new_charge(self) -> ChargeFireController:
        return ChargeFireController(
            cooldown=self.tuning.charge_cooldown,
            max_hold=self.tuning.charge_max_hold,
            audio=self.audio,
        )

    def _device_range(self) -> PitchRange:
        if self.input_source is not None:
            return self.input_source.pitch_range()
        return PitchRange(DEFAULT_DEVICE_MIN, DEFAULT_DEVICE_MAX)

    def _load_high_score(self) -> HighScore:
        if self.scores is None:
            return HighScore()
        return self.scores.load(self.score_key)

    def snapshot(self) -> MatchSnapshot:
        charge = None
        if self.is_chord_mode and self.state == GameState.PLAYING:
            charge = self.charge.view(self.clock)
        return MatchSnapshot(
            state=self.state,
            game_mode=self.game_mode,
            note_mode=self.note_mode,
            wave=self.wave,
            waves_total=self.waves_total,
            health=self.health,
            max_health=self.tuning.max_health,
            score=self.score,
            high_score=self.high_score,
            palette=self.palette,
            rig=self.rig.view() if self.rig is not None else None,
            targets=tuple(t.view() for t in self.targets),
            projectiles=tuple(p.view() for p in self.projectiles),
            charge=charge,
            transition_remaining=max(0.0, self.transition_remaining),
            result=self.result,
            pitch_range=self.pitch_range,
        )
