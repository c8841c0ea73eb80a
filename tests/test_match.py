"""Tests for match flow: firing, shield damage, waves and endings."""

import pytest

from noteinvaders.charge import Idle
from noteinvaders.chords import ChordSpec, chord_notes, chord_name
from noteinvaders.models import DefeatReason, GameMode, GameState, HighScore, NoteMode, TargetState
from noteinvaders.target import TARGET_SIZE, Target
from noteinvaders.waves import pitch_to_x


def _start(make_match, **kwargs):
    match = make_match(**kwargs)
    match.start_game()
    return match


def _single(match, pitch, y=50.0, speed=0.0):
    x = pitch_to_x(pitch, match.field_width, match.pitch_range) - TARGET_SIZE / 2
    return Target.single(pitch, x, y, speed=speed)


def _chord(match, root, chord_type="maj", y=50.0):
    spec = ChordSpec(root=root, chord_type=chord_type, notes=chord_notes(root, chord_type), name=chord_name(root, chord_type))
    x = pitch_to_x(root, match.field_width, match.pitch_range) - TARGET_SIZE / 2
    return Target.for_chord(spec, x, y, speed=0.0)


def test_start_game_spawns_first_wave(make_match, audio):
    match = _start(make_match)
    assert match.state == GameState.PLAYING
    assert match.wave == 1
    assert len(match.targets) == 5
    assert match.rig.ammo == 60
    assert match.health == 100
    assert match.pitch_range.span == 36
    assert "play_game_start" in audio.names()


def test_notes_ignored_before_start(make_match):
    match = make_match()
    match.handle_note_on(60)
    assert match.state == GameState.TITLE
    assert len(match.scheduler) == 0


def test_single_note_hit_resolves_after_delay(make_match, audio):
    match = _start(make_match)
    match.targets = [_single(match, p) for p in (60, 64, 67)]
    target = match.targets[1]
    aim = target.center

    match.handle_note_on(64)
    assert match.score == 0
    assert len(match.scheduler) == 1

    match.tick(0.11)
    assert match.score == 100
    assert match.rig.ammo == 59
    assert target.state == TargetState.DYING
    assert len(match.projectiles) == 1
    assert match.projectiles[0].target == aim
    assert match.projectiles[0].hit
    assert {"play_destroyed", "play_hit"} <= set(audio.names())
    assert match.state == GameState.PLAYING


def test_unmatched_note_is_a_miss(make_match, audio):
    match = _start(make_match)
    match.targets = [_single(match, 60)]
    match.handle_note_on(72)
    match.tick(0.11)
    assert match.score == 0
    assert match.rig.ammo == 59
    assert "play_miss" in audio.names()
    assert match.targets[0].is_alive


def test_repeated_note_is_debounced(make_match):
    match = _start(make_match)
    match.targets = [_single(match, 60), _single(match, 64)]
    match.handle_note_on(60)
    match.handle_note_on(60)
    assert len(match.scheduler) == 1
    match.handle_note_off(60)
    match.handle_note_on(60)
    assert len(match.scheduler) == 2


def test_pending_shots_reserve_ammo(make_match):
    match = _start(make_match)
    match.targets = [_single(match, 60), _single(match, 64)]
    match.rig.ammo = 1
    match.handle_note_on(60)
    match.handle_note_on(64)
    assert len(match.scheduler) == 1


def test_chord_target_destroyed_with_triad(make_match, audio):
    match = _start(make_match, note_mode=NoteMode.CHORD)
    match.targets = [_chord(match, 60), _chord(match, 67)]
    for pitch in (60, 64, 67):
        match.handle_note_on(pitch)
    assert len(match.scheduler) == 1

    match.tick(0.2)
    assert match.score == 300
    assert match.rig.ammo == 59
    assert match.targets[0].state == TargetState.DYING
    assert match.targets[1].is_alive
    assert match.projectiles[0].power == 3
    assert "play_explosive" in audio.names()
    assert isinstance(match.charge.state, Idle)


def test_unmatched_four_notes_release_full_power(make_match, audio):
    match = _start(make_match, note_mode=NoteMode.CHORD)
    match.targets = [_chord(match, 60), _chord(match, 67)]
    for pitch in (61, 63, 66, 70):
        match.handle_note_on(pitch)
    assert len(match.scheduler) == 1
    assert match.rig.target_x == pytest.approx(
        pitch_to_x(70, match.field_width, match.pitch_range) - match.rig.width / 2
    )

    match.tick(0.11)
    assert match.score == 0
    assert match.rig.ammo == 59
    assert match.projectiles[0].power == 4
    assert "play_miss" in audio.names()
    assert "play_explosive" in audio.names()


def test_shield_hit_costs_health_once(make_match, audio):
    match = _start(make_match)
    low, high = _single(match, 60, y=520.0), _single(match, 64)
    match.targets = [low, high]

    match.tick(0.01)
    assert match.health == 80
    assert low.state == TargetState.DYING
    assert low.has_hit_shield
    assert "play_shield_hit" in audio.names()

    match.tick(0.01)
    assert match.health == 80

    high.y = 520.0
    match.tick(0.01)
    assert match.health == 60


def test_shield_destroyed_ends_game(make_match):
    match = _start(make_match)
    match.targets = [_single(match, 60, y=520.0), _single(match, 64)]
    match.health = 20
    match.tick(0.01)
    assert match.state == GameState.GAME_OVER
    assert match.result.reason == DefeatReason.SHIELD_DESTROYED


def test_last_shot_clearing_wave_beats_empty_magazine(make_match):
    match = _start(make_match)
    match.targets = [_single(match, 60)]
    match.rig.ammo = 1
    match.handle_note_on(60)
    match.tick(0.11)
    assert match.rig.ammo == 0
    assert match.state == GameState.WAVE_TRANSITION
    assert match.wave == 2


def test_out_of_ammo_waits_for_shots_in_flight(make_match, scores):
    match = _start(make_match)
    match.targets = [_single(match, 60), _single(match, 64)]
    match.rig.ammo = 1
    match.handle_note_on(60)

    match.tick(0.11)
    assert match.state == GameState.PLAYING
    assert match.rig.ammo == 0

    match.tick(0.3)
    assert match.state == GameState.GAME_OVER
    assert match.result.reason == DefeatReason.OUT_OF_AMMO
    assert match.result.final_score == 100
    assert match.result.is_high_score
    assert scores.saves == [(100, "classic", 1)]


def test_lower_score_is_not_recorded(make_match, scores, audio):
    scores.records["classic"] = HighScore(10000, 5)
    match = _start(make_match)
    match.targets = [_single(match, 60), _single(match, 64)]
    match.rig.ammo = 0
    match.tick(0.01)
    assert match.state == GameState.GAME_OVER
    assert not match.result.is_high_score
    assert scores.saves == []
    assert ("play_game_over", (False,)) in audio.calls


def test_classic_wave_transition(make_match, audio):
    match = _start(make_match)
    match.targets = [_single(match, 60)]
    match.handle_note_on(60)
    match.tick(0.11)
    assert match.state == GameState.WAVE_TRANSITION
    assert "play_wave_complete" in audio.names()

    match.tick(1.0)
    assert match.state == GameState.WAVE_TRANSITION
    match.tick(1.1)
    assert match.state == GameState.PLAYING
    assert match.wave == 2
    assert len(match.targets) == 6
    assert match.rig.ammo == 59


def test_classic_victory_after_final_wave(make_match, scores, audio):
    match = _start(make_match)
    match.wave = 5
    match.targets = [_single(match, 60)]
    match.handle_note_on(60)
    match.tick(0.11)

    assert match.state == GameState.VICTORY
    result = match.result
    assert result.base_score == 100
    assert result.ammo_bonus == 590
    assert result.health_bonus == 1000
    assert result.wave_bonus == 2500
    assert result.final_score == 4190
    assert match.score == 4190
    assert scores.saves == [(4190, "classic", 5)]
    assert ("play_victory", (True,)) in audio.calls


def test_survival_refills_ammo_between_waves(make_match):
    match = _start(make_match, game_mode=GameMode.SURVIVAL)
    targets = [_single(match, p) for p in (60, 62, 64, 66)]
    for target in targets[1:]:
        target.state = TargetState.DEAD
    match.targets = targets
    match.rig.ammo = 20

    match.handle_note_on(60)
    match.tick(0.11)
    assert match.state == GameState.WAVE_TRANSITION
    assert match.rig.ammo == 19

    match.tick(2.1)
    assert match.state == GameState.PLAYING
    assert match.rig.ammo == 24
    assert len(match.targets) == 6


def test_end_survival_scores_as_victory(make_match, scores):
    match = _start(make_match, game_mode=GameMode.SURVIVAL)
    match.end_survival()
    assert match.state == GameState.VICTORY
    assert match.result.wave_bonus == 500
    assert match.result.final_score == 600 + 1000 + 500
    assert scores.saves == [(2100, "survival", 1)]


def test_end_survival_ignored_in_classic(make_match):
    match = _start(make_match)
    match.end_survival()
    assert match.state == GameState.PLAYING


def test_pause_drops_pending_shots(make_match):
    match = _start(make_match)
    match.targets = [_single(match, 60), _single(match, 64)]
    match.handle_note_on(60)
    match.pause()
    assert match.state == GameState.PAUSED
    assert len(match.scheduler) == 0

    clock = match.clock
    match.tick(1.0)
    assert match.clock == clock

    match.resume()
    match.tick(0.2)
    assert match.score == 0
    assert match.rig.ammo == 60


def test_resume_applies_pause_penalty(make_match):
    match = _start(make_match)
    match.targets = [_single(match, 60, y=100.0, speed=10.0), _single(match, 64)]
    match.pause()
    match.resume()
    assert match.state == GameState.PLAYING
    assert match.targets[0].y == pytest.approx(125.0)


def test_resume_penalty_can_reach_shield(make_match):
    match = _start(make_match)
    match.targets = [_single(match, 60, y=500.0, speed=10.0), _single(match, 64)]
    match.pause()
    match.resume()
    assert match.health == 80


def test_focus_loss_cancels_charge(make_match):
    match = _start(make_match, note_mode=NoteMode.CHORD)
    match.targets = [_chord(match, 60), _chord(match, 67)]
    for pitch in (60, 64, 67):
        match.handle_note_on(pitch)
    assert len(match.scheduler) == 1

    match.set_focus(False)
    assert len(match.scheduler) == 0
    assert isinstance(match.charge.state, Idle)

    match.set_focus(True)
    match.tick(0.2)
    assert match.score == 0
    assert match.targets[0].is_alive


def test_unfocused_step_is_capped(make_match):
    match = _start(make_match)
    match.targets = [_single(match, 60, y=100.0, speed=10.0), _single(match, 64)]
    match.set_focus(False)
    match.tick(1.0)
    assert match.clock == pytest.approx(0.25)
    assert match.targets[0].y == pytest.approx(102.5)


def test_restart_resets_everything(make_match):
    match = _start(make_match)
    match.targets = [_single(match, 60), _single(match, 64)]
    match.rig.ammo = 0
    match.tick(0.01)
    assert match.state == GameState.GAME_OVER

    match.restart()
    assert match.state == GameState.PLAYING
    assert match.score == 0
    assert match.wave == 1
    assert match.rig.ammo == 60
    assert match.result is None


def test_process_input_drains_source(make_match):
    match = _start(make_match)
    source = match.input_source
    match.targets = [_single(match, 60), _single(match, 64)]
    source.press(60)
    source.release(60)
    events = match.process_input()
    assert [e.is_note_on for e in events] == [True, False]
    assert len(match.scheduler) == 1
    assert source.poll() is None


def test_snapshot_shows_charge_only_in_chord_mode(make_match):
    single = _start(make_match)
    snap = single.snapshot()
    assert snap.state == GameState.PLAYING
    assert snap.charge is None
    assert snap.rig is not None
    assert len(snap.targets) == 5

    chord = _start(make_match, note_mode=NoteMode.CHORD)
    chord.targets = [_chord(chord, 60)]
    assert chord.snapshot().charge is None
    chord.handle_note_on(62)
    view = chord.snapshot().charge
    assert view.held == (62,)
    assert view.power == 1


def test_playing_state_without_rig_is_inert(make_match):
    match = make_match()
    match.state = GameState.PLAYING
    match.tick(0.5)
    match.handle_note_on(60)
    assert match.clock == 0.0
    assert match.state == GameState.PLAYING
    assert len(match.scheduler) == 0
