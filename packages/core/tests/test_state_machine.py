"""日历关联状态机流转单元测试

测试内容：
1. 合法流转通过
2. 非法流转被拒绝
3. COMMITTED 只能回到 IDLE
"""

import pytest
from notekeeper.core.models.enums import (
    CANCELLABLE_STATES,
    LINK_TRANSITIONS,
    LinkState,
    validate_link_transition,
)


class TestLinkStateTransitions:
    """状态机流转验证"""

    # 所有合法流转
    @pytest.mark.parametrize(
        "from_state,to_state",
        [
            (LinkState.IDLE, LinkState.CALENDAR_SELECTED),
            (LinkState.CALENDAR_SELECTED, LinkState.DATE_PICKED),
            (LinkState.CALENDAR_SELECTED, LinkState.IDLE),
            (LinkState.DATE_PICKED, LinkState.TIME_PICKED),
            (LinkState.DATE_PICKED, LinkState.IDLE),
            (LinkState.TIME_PICKED, LinkState.COMMITTED),
            (LinkState.TIME_PICKED, LinkState.IDLE),
            (LinkState.COMMITTED, LinkState.IDLE),
        ],
    )
    def test_valid_transition(self, from_state: LinkState, to_state: LinkState):
        """合法流转应通过验证"""
        assert validate_link_transition(from_state, to_state) is True

    # 跳步与回退都是非法流转
    @pytest.mark.parametrize(
        "from_state,to_state",
        [
            (LinkState.IDLE, LinkState.DATE_PICKED),
            (LinkState.IDLE, LinkState.COMMITTED),
            (LinkState.IDLE, LinkState.IDLE),
            (LinkState.CALENDAR_SELECTED, LinkState.TIME_PICKED),
            (LinkState.DATE_PICKED, LinkState.CALENDAR_SELECTED),
            (LinkState.DATE_PICKED, LinkState.COMMITTED),
            (LinkState.TIME_PICKED, LinkState.DATE_PICKED),
        ],
    )
    def test_invalid_transition(self, from_state: LinkState, to_state: LinkState):
        """非法流转应被拒绝"""
        assert validate_link_transition(from_state, to_state) is False

    def test_committed_only_returns_to_idle(self):
        """COMMITTED 之后只能回到 IDLE"""
        for target in LinkState:
            expected = target == LinkState.IDLE
            assert validate_link_transition(LinkState.COMMITTED, target) is expected

    def test_cancellable_states_can_reach_idle(self):
        """所有可取消状态都能直接回到 IDLE"""
        assert LinkState.IDLE not in CANCELLABLE_STATES
        assert LinkState.COMMITTED not in CANCELLABLE_STATES
        for state in CANCELLABLE_STATES:
            assert LinkState.IDLE in LINK_TRANSITIONS[state]

    def test_transitions_completeness(self):
        """LINK_TRANSITIONS 覆盖所有状态"""
        for state in LinkState:
            assert state in LINK_TRANSITIONS, f"{state} 未在 LINK_TRANSITIONS 中定义"
