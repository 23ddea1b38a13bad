"""
出牌错误

attempt_play 拒绝一手牌时抛出的异常，全部继承 GameError。
"""


class GameError(Exception):
    """非法出牌的基类"""


class NoSuchPlay(GameError):
    """这组牌不构成任何牌型"""


class MustOpenWithRequiredCard(GameError):
    """首轮出牌必须包含梅花 3"""


class CannotPassWithControl(GameError):
    """拥有出牌权时不能 PASS"""


class WrongLength(GameError):
    """与桌面上的牌张数不同"""


class TooLow(GameError):
    """打不过桌面上的牌"""


class CardNotInHand(GameError):
    """出的牌不在手牌中"""


class GameOver(GameError):
    """游戏已经结束"""


class StaleView(GameError):
    """视图所属的回合已经结束"""
