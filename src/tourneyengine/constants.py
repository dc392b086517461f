# Tourney Engine
# Copyright (C) 2025  Tourney Engine developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

# --- Match statuses ---
STATUS_SCHEDULED = "scheduled"
STATUS_ONGOING = "ongoing"
STATUS_COMPLETED = "completed"
STATUS_POSTPONED = "postponed"
STATUS_CANCELLED = "cancelled"
MATCH_STATUSES = (
    STATUS_SCHEDULED,
    STATUS_ONGOING,
    STATUS_COMPLETED,
    STATUS_POSTPONED,
    STATUS_CANCELLED,
)

# --- Format keys ---
FORMAT_LEAGUE_ONLY = "league_only"
FORMAT_KNOCKOUT = "knockout"
FORMAT_GROUPS_KNOCKOUT = "groups_knockout"
FORMAT_SWISS_SYSTEM = "swiss_system"
FORMAT_ROUND_ROBIN_FINAL = "round_robin_final"
DEFAULT_FORMAT = FORMAT_LEAGUE_ONLY

# Keys stored by older seasons
LEGACY_FORMAT_KEYS = {
    "generate_playoffs": FORMAT_SWISS_SYSTEM,
    "default": FORMAT_LEAGUE_ONLY,
}

# --- Phase ids ---
PHASE_START = "start"
PHASE_REGULAR_SEASON = "regular_season"
PHASE_GROUP_STAGE = "group_stage"
PHASE_KNOCKOUT = "knockout"
PHASE_ROUND_OF_32 = "round-of-32"
PHASE_ROUND_OF_16 = "round-of-16"
PHASE_QUARTER_FINAL = "quarter-final"
PHASE_SEMI_FINAL = "semi-final"
PHASE_THIRD_PLACE = "third-place_playoff"
PHASE_FINAL = "final"
PHASE_POULE_A = "poule_a"
PHASE_POULE_B = "poule_b"

# Phase names written by older seasons
LEGACY_PHASE_IDS = {
    "Inizio Torneo": PHASE_START,
    "Fase 1": PHASE_REGULAR_SEASON,
    "Fase 2": PHASE_POULE_A,
    "Fase 3": PHASE_FINAL,
}

# --- Match generation types ---
GEN_ROUND_ROBIN = "round_robin"
GEN_KNOCKOUT = "knockout"
GEN_SWISS_PAIRING = "swiss_pairing"
GEN_GROUP_ASSIGNMENT = "group_assignment"

# --- Advancement ---
ADVANCE_TOP = "top"
ADVANCE_BOTTOM = "bottom"

# --- Tie-breakers ---
TB_HEAD_TO_HEAD = "head_to_head"
TB_GOAL_DIFFERENCE = "goal_difference"
TB_GOALS_SCORED = "goals_scored"
TB_GOALS_AGAINST = "goals_against"
TB_WINS = "wins"
TB_FAIR_PLAY = "fair_play"
TIE_BREAKERS = (
    TB_HEAD_TO_HEAD,
    TB_GOAL_DIFFERENCE,
    TB_GOALS_SCORED,
    TB_GOALS_AGAINST,
    TB_WINS,
    TB_FAIR_PLAY,
)
DEFAULT_TIE_BREAKERS = [TB_HEAD_TO_HEAD, TB_GOAL_DIFFERENCE, TB_GOALS_SCORED]

# --- Points ---
DEFAULT_POINTS_PER_WIN = 3
DEFAULT_POINTS_PER_DRAW = 1
DEFAULT_POINTS_PER_LOSS = 0
MIN_POINTS = 0
MAX_POINTS = 10

# Knockout advancement table: 3 per win, minus one per loss
KNOCKOUT_POINTS_PER_WIN = 3
KNOCKOUT_POINTS_PER_LOSS = -1

# --- Seeding / playoff / poule options ---
SEEDING_SEEDED = "seeded"
SEEDING_RANDOM = "random"
SEEDING_MANUAL = "manual"
SEEDING_METHODS = (SEEDING_RANDOM, SEEDING_SEEDED, SEEDING_MANUAL)

PLAYOFF_SINGLE_MATCH = "single_match"
PLAYOFF_HOME_AWAY = "home_away"
PLAYOFF_BEST_OF_3 = "best_of_3"
PLAYOFF_FORMATS = (PLAYOFF_SINGLE_MATCH, PLAYOFF_HOME_AWAY, PLAYOFF_BEST_OF_3)

POULE_ROUND_ROBIN = "round_robin"
POULE_SWISS = "swiss"
POULE_FORMATS = (POULE_ROUND_ROBIN, POULE_SWISS)

# --- Bracket layout ---
VALID_BRACKET_SIZES = (4, 8, 16, 32)
VALID_PLAYOFF_TEAMS = (2, 4, 8)
# Slot index for each seed (0-based), so the top seeds meet as late as possible
BRACKET_POSITIONS = {
    2: [0, 1],
    4: [0, 3, 2, 1],
    8: [0, 7, 4, 3, 2, 5, 6, 1],
    16: [0, 15, 8, 7, 4, 11, 12, 3, 2, 13, 10, 5, 6, 9, 14, 1],
    32: [
        0, 31, 16, 15, 8, 23, 24, 7, 4, 27, 20, 11, 12, 19, 28, 3,
        2, 29, 18, 13, 10, 21, 26, 5, 6, 25, 22, 9, 14, 17, 30, 1,
    ],
}
# Teams without a seed sort behind every seeded team
UNSEEDED_SORT_KEY = 999

# --- Settings ranges ---
MIN_TEAMS = 2
MIN_GROUP_COUNT = 2
MAX_GROUP_COUNT = 8
MIN_TEAMS_PER_GROUP = 2
MAX_TEAMS_PER_GROUP = 8
MIN_ADVANCING_PER_GROUP = 1
MAX_ADVANCING_PER_GROUP = 4
MIN_PHASE1_ROUNDS = 1
MAX_PHASE1_ROUNDS = 15
MIN_FINAL_STAGE_TEAMS = 2
MAX_FINAL_STAGE_TEAMS = 8

# Warning thresholds
MANY_TEAMS_THRESHOLD = 20
MANY_MATCHES_THRESHOLD = 200

# Search budget for repeat-free Swiss pairings
SWISS_SEARCH_NODE_LIMIT = 20000

# --- Message keys (resolved by the presentation layer) ---
MSG_MIN_TEAMS = "tournament.validation.minTeams"
MSG_MANY_TEAMS = "tournament.validation.manyTeamsWarning"
MSG_MANY_MATCHES = "tournament.validation.manyMatchesWarning"
MSG_INVALID_NUMBER = "tournament.validation.invalidNumber"
MSG_OUT_OF_RANGE = "tournament.validation.outOfRange"
MSG_INVALID_OPTION = "tournament.validation.invalidOption"
MSG_INVALID_BOOLEAN = "tournament.validation.invalidBoolean"
MSG_AT_LEAST_ONE_TIE_BREAKER = "tournament.validation.atLeastOneTieBreaker"
MSG_INVALID_BRACKET_SIZE = "tournament.validation.invalidBracketSize"
MSG_KNOCKOUT_POWER_OF_TWO = "tournament.validation.knockoutPowerOfTwo"
MSG_TOO_MANY_TEAMS_FOR_BRACKET = "tournament.validation.tooManyTeamsForBracket"
MSG_FEWER_TEAMS_THAN_BRACKET = "tournament.validation.fewerTeamsThanBracket"
MSG_DOUBLE_ELIMINATION = "tournament.validation.doubleEliminationNotImplemented"
MSG_NOT_ENOUGH_TEAMS_FOR_GROUPS = "tournament.validation.notEnoughTeamsForGroups"
MSG_EXTRA_TEAMS = "tournament.validation.extraTeamsWarning"
MSG_ADVANCING_NOT_POWER_OF_TWO = "tournament.validation.advancingTeamsNotPowerOfTwo"
MSG_TOO_MANY_ADVANCING = "tournament.validation.tooManyAdvancing"
MSG_NOT_ENOUGH_TEAMS_FOR_PLAYOFFS = "tournament.validation.notEnoughTeamsForPlayoffs"
MSG_ALL_TEAMS_IN_PLAYOFFS = "tournament.validation.allTeamsInPlayoffsWarning"
MSG_NOT_ENOUGH_TEAMS_FOR_SWISS = "tournament.validation.notEnoughTeamsForSwiss"
MSG_TOO_MANY_SWISS_ROUNDS = "tournament.validation.tooManySwissRounds"
MSG_MIN_TWO_POULES = "tournament.validation.minTwoPoules"
MSG_EQUAL_POULE_SIZE = "tournament.validation.equalPouleSize"
MSG_DUPLICATE_SNAKE_POSITIONS = "tournament.validation.duplicateSnakePositions"
MSG_INVALID_SNAKE_POSITION = "tournament.validation.invalidSnakePosition"
MSG_EXTRA_POULES = "tournament.validation.extraPoulesIgnored"
MSG_FINAL_STAGE_TOO_LARGE = "tournament.validation.finalStageLargerThanPoule"

MSG_WRONG_SETTINGS = "tournament.generation.invalidSettings"
MSG_PHASE_NOT_SCHEDULABLE = "tournament.generation.phaseNotSchedulable"
MSG_UNSUPPORTED_GENERATION = "tournament.generation.unsupportedType"
MSG_NO_TEAMS_ADVANCING = "tournament.generation.noTeamsAdvancing"
MSG_FORCED_REPEAT = "tournament.generation.forcedRepeatPairing"

MSG_OPEN_MATCHES = "tournament.transition.openMatches"
MSG_UNRESOLVED_TIE = "tournament.transition.unresolvedTie"
MSG_SNAPSHOT_FAILED = "tournament.transition.snapshotFailed"
MSG_PHASE_ALREADY_CLOSED = "tournament.transition.phaseAlreadyClosed"
MSG_NO_MATCHES = "tournament.transition.noMatches"
