"""
Course 1 - Hatching Objects
Rule sets for each sub-level, keyed by sub-level number
"""

from codepets.validation.rules import ClassHeader, FieldDecl, MethodSignature, RuleSet, Statement

EGG_CLASS = ClassHeader("egg_class", name="Egg")

SUB_LEVELS = {
    # The Egg: class header and fields
    1: RuleSet((
        EGG_CLASS,
        FieldDecl("egg_color_field", type_name="String", name="color"),
        FieldDecl("egg_size_field", type_name="int", name="size"),
        FieldDecl("egg_hatched_field", type_name="boolean", name="hatched"),
    )),
    # Laying the Egg: constructor
    2: RuleSet((
        EGG_CLASS,
        MethodSignature("egg_constructor", name="Egg", params=("String", "int")),
        Statement("egg_assign_color", snippets=("this.color = IDENT;",)),
        Statement("egg_assign_size", snippets=("this.size = IDENT;",)),
        Statement("egg_assign_hatched", snippets=("this.hatched = false;",)),
    )),
    # Candling: getters
    3: RuleSet((
        EGG_CLASS,
        MethodSignature("egg_get_color", name="getColor", returns="String"),
        Statement("egg_return_color", snippets=("return color;", "return this.color;")),
        MethodSignature("egg_get_size", name="getSize", returns="int"),
        Statement("egg_return_size", snippets=("return size;", "return this.size;")),
        MethodSignature("egg_is_hatched", name="isHatched", returns="boolean"),
        Statement("egg_return_hatched", snippets=("return hatched;", "return this.hatched;")),
    )),
    # The Pet
    4: RuleSet((
        ClassHeader("pet_class", name="Pet"),
        FieldDecl("pet_name_field", type_name="String", name="name"),
        FieldDecl("pet_energy_field", type_name="int", name="energy"),
        MethodSignature("pet_constructor", name="Pet", params=("String",)),
        MethodSignature("pet_eat_method", name="eat", returns="void"),
        Statement("pet_energy_increment", snippets=("energy++;", "this.energy++;")),
    )),
    # Hatching
    5: RuleSet((
        EGG_CLASS,
        MethodSignature("egg_hatch_method", name="hatch", returns="Pet"),
        Statement("egg_hatch_sets_flag", snippets=("hatched = true;", "this.hatched = true;")),
        Statement("egg_hatch_returns_pet", snippets=("return new Pet(",)),
    )),
    # Dragons
    6: RuleSet((
        ClassHeader("dragon_class", name="Dragon", extends="Pet"),
        MethodSignature("dragon_constructor", name="Dragon", params=("String",)),
        Statement("dragon_super_call", snippets=("super(IDENT);",)),
        Statement("dragon_override_eat", snippets=("@Override public void eat()",)),
    )),
}
