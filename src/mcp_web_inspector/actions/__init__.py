"""Page actions: element description, navigation, interaction, content and network views."""
