"""Command handlers and the registry mapping command tags to them."""

from tradecord.domain.enums import CommandTag
from tradecord.services.handlers import (
    buddy,
    catching,
    collection,
    daycare,
    items,
    progression,
    trainer,
)
from tradecord.services.handlers.base import GameServices, Handler, Invocation


def build_registry() -> dict[CommandTag, Handler]:
    """Return the handler for every command tag."""

    return {
        CommandTag.CATCH: catching.handle_catch,
        CommandTag.TRADE: catching.handle_trade,
        CommandTag.LIST: collection.handle_list,
        CommandTag.INFO: collection.handle_info,
        CommandTag.MASS_RELEASE: collection.handle_mass_release,
        CommandTag.RELEASE: collection.handle_release,
        CommandTag.GIFT: collection.handle_gift,
        CommandTag.FAVORITES_INFO: collection.handle_favorites_info,
        CommandTag.FAVORITES: collection.handle_favorites,
        CommandTag.DAYCARE_INFO: daycare.handle_daycare_info,
        CommandTag.DAYCARE: daycare.handle_daycare,
        CommandTag.SET_TRAINER_INFO: trainer.handle_set_trainer_info,
        CommandTag.GET_TRAINER_INFO: trainer.handle_get_trainer_info,
        CommandTag.SET_TIMEZONE: trainer.handle_set_timezone,
        CommandTag.DELETE_PLAYER: trainer.handle_delete_player,
        CommandTag.DEX: progression.handle_dex,
        CommandTag.PERKS: progression.handle_perks,
        CommandTag.SPECIES_BOOST: progression.handle_species_boost,
        CommandTag.BUDDY: buddy.handle_buddy,
        CommandTag.NICKNAME: buddy.handle_nickname,
        CommandTag.EVOLVE: buddy.handle_evolve,
        CommandTag.GIVE_ITEM: items.handle_give_item,
        CommandTag.GIFT_ITEM: items.handle_gift_item,
        CommandTag.TAKE_ITEM: items.handle_take_item,
        CommandTag.ITEM_LIST: items.handle_item_list,
        CommandTag.ITEM_DROP: items.handle_item_drop,
    }


__all__ = ["GameServices", "Handler", "Invocation", "build_registry"]
